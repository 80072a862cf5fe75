"""Fetching vendored documentation trees from upstream repositories."""

from __future__ import annotations

import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

from ..config import SiteConfig, SourceConfig
from ..errors import VendorError
from ..logging import get_logger
from ..models import Channel


@dataclass(frozen=True)
class VendorResult:
    """Where a source's docs were fetched from and copied to."""

    namespace: str
    repo: str
    branch: str
    destination: Path


class DocsVendor:
    """Sparse-clones the docs directory of upstream repositories into source roots."""

    def __init__(
        self,
        runner: Callable[..., str] | None = None,
        tempdir_factory: Callable[[], str] | None = None,
    ) -> None:
        self._runner = runner or self._default_runner
        self._tempdir_factory = tempdir_factory or (lambda: tempfile.mkdtemp(prefix="docsite-"))
        self.logger = get_logger("vendor")

    def sync_all(
        self,
        config: SiteConfig,
        channel: Channel,
        *,
        only: Optional[Sequence[str]] = None,
    ) -> List[VendorResult]:
        """Refresh every source that declares a ``vendor`` block, in declaration order."""
        selected = set(only) if only else None
        vendored = [entry for entry in config.sources if entry.vendor is not None]
        if selected is not None:
            unknown = selected - {entry.namespace for entry in vendored}
            if unknown:
                raise VendorError(f"No vendored source named: {', '.join(sorted(unknown))}")
        results: List[VendorResult] = []
        for entry in vendored:
            if selected is not None and entry.namespace not in selected:
                continue
            results.append(self.sync(entry, channel))
        return results

    def sync(self, entry: SourceConfig, channel: Channel) -> VendorResult:
        """Replace ``entry.path`` with the upstream ``subdir`` of the chosen branch."""
        if entry.vendor is None:
            raise VendorError(f"Source '{entry.namespace}' has no vendor settings")
        vendor = entry.vendor
        branch = vendor.branch or channel.edit_branch
        checkout = Path(self._tempdir_factory())
        self.logger.info("Fetching %s (branch: %s)", vendor.repo, branch)
        try:
            self._run(
                [
                    "git",
                    "clone",
                    "--depth",
                    "1",
                    "--filter=blob:none",
                    "--sparse",
                    "-b",
                    branch,
                    vendor.repo,
                    str(checkout),
                ],
                cwd=checkout.parent,
            )
            self._run(["git", "sparse-checkout", "set", vendor.subdir], cwd=checkout)
            docs = checkout / vendor.subdir
            if not docs.is_dir():
                raise VendorError(
                    f"{vendor.repo}@{branch} has no '{vendor.subdir}' directory"
                )
            self._replace_tree(docs, entry.path)
        except (subprocess.CalledProcessError, OSError) as exc:
            raise VendorError(
                f"git failed while fetching {vendor.repo}@{branch} for '{entry.namespace}': {exc}"
            ) from exc
        finally:
            shutil.rmtree(checkout, ignore_errors=True)

        self.logger.info("Updated %s from %s (branch: %s)", entry.path, vendor.repo, branch)
        return VendorResult(
            namespace=entry.namespace,
            repo=vendor.repo,
            branch=branch,
            destination=entry.path,
        )

    # ------------------------------------------------------------------
    # Helpers

    @staticmethod
    def _replace_tree(source: Path, destination: Path) -> None:
        destination.parent.mkdir(parents=True, exist_ok=True)
        staging = destination.with_name(destination.name + ".tmp")
        if staging.exists():
            shutil.rmtree(staging)
        shutil.copytree(source, staging, ignore=shutil.ignore_patterns(".git"))
        if destination.exists():
            shutil.rmtree(destination)
        staging.rename(destination)

    def _run(self, args: Iterable[str], *, cwd: Path) -> str:
        return self._runner(args, cwd=cwd)

    @staticmethod
    def _default_runner(args: Iterable[str], *, cwd: Path) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=True,
        )
        return completed.stdout


__all__ = ["DocsVendor", "VendorResult"]
