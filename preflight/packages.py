"""On-demand system package installation for vm-preflight."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Dict, List, Optional

from preflight.constants import APT_SOURCES, DEFAULT_MIRROR_HOST, DEFAULT_MIRRORS
from preflight.country import CountryResolver
from preflight.exceptions import InstallFailure
from preflight.models import PackageRequest
from preflight.status import StatusBroadcaster
from preflight.utils import log, run


class PackageInstaller:
    """Install Debian packages, switching to a regional mirror the first time one is needed."""

    def __init__(
        self,
        resolver: CountryResolver,
        status: Optional[StatusBroadcaster] = None,
        mirrors: Optional[Dict[str, str]] = None,
        sources_path: Path = APT_SOURCES,
    ) -> None:
        self.resolver = resolver
        self.status = status or StatusBroadcaster()
        self.mirrors = dict(DEFAULT_MIRRORS) if mirrors is None else mirrors
        self.sources_path = sources_path

    def is_installed(self, package: str) -> bool:
        result = self._apt(["apt-mark", "showinstall"], check=False, capture_output=True)
        return package in (result.stdout or "").splitlines()

    def ensure(self, package: str, description: str) -> bool:
        """Install ``package`` unless already present. Returns True when an install ran."""
        request = PackageRequest(name=package, description=description)
        request.installed = self.is_installed(request.name)
        if request.installed:
            log("DEBUG", f"Package {request.name} already installed")
            return False

        msg = f"Installing {request.description}..."
        log("INFO", msg)
        self.status.update(msg)

        country = self.resolver.code
        if not country:
            country = self.resolver.resolve()
        if country:
            self.use_mirror(country)

        self._apt(["apt-get", "-qq", "update"])
        self._apt(
            ["apt-get", "-qq", "--no-install-recommends", "-y", "install", request.name],
            stdout=subprocess.DEVNULL,
        )
        log("SUCCESS", f"Installed {request.description}")
        return True

    def use_mirror(self, country: str) -> bool:
        """Point the apt sources at the mirror for ``country``, if one is known."""
        host = self.mirrors.get(country.upper())
        if not host:
            return False
        if not self.sources_path.exists():
            log("WARN", f"{self.sources_path} not found; keeping default package mirror")
            return False
        sources = self.sources_path.read_text()
        if DEFAULT_MIRROR_HOST not in sources:
            return False
        self.sources_path.write_text(sources.replace(DEFAULT_MIRROR_HOST, host))
        log("INFO", f"Using package mirror {host} for country {country.upper()}")
        return True

    def _apt(self, cmd: List[str], **kwargs) -> subprocess.CompletedProcess:
        env = dict(os.environ, DEBIAN_FRONTEND="noninteractive")
        try:
            return run(cmd, env=env, **kwargs)
        except subprocess.CalledProcessError as exc:
            raise InstallFailure(cmd, exc.returncode) from exc
        except OSError as exc:
            raise InstallFailure(cmd, 127) from exc
