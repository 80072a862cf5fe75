"""Page discovery, front matter and cross reference extraction."""

from .frontmatter import split_front_matter
from .headings import Slugger, extract_headings, slugify
from .index import PageIndex, build_page_index
from .pages import iter_page_files, scan_route, strip_number_prefix
from .references import extract_references, is_external, split_target

__all__ = [
    "PageIndex",
    "Slugger",
    "build_page_index",
    "extract_headings",
    "extract_references",
    "is_external",
    "iter_page_files",
    "scan_route",
    "slugify",
    "split_front_matter",
    "split_target",
    "strip_number_prefix",
]
