"""
Fetch remote source files into the data directory.

A file that already exists locally is reused as-is; presence alone decides.
Downloads stream into `<name>.part` and are renamed into place only once the
whole body has been written, so an interrupted run never leaves a truncated
file at the final path.
"""

from __future__ import annotations

import contextlib
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import requests

from asphalt_emissions.errors import DownloadError
from asphalt_emissions.paths import section

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 60
CHUNK_SIZE = 1 << 20


def request_options(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """timeout_s / verify_ssl from the `requests` config section (ca_bundle wins over verify_ssl)."""
    req_cfg = section(cfg, "requests")
    verify_ssl: Union[bool, str] = req_cfg.get("verify_ssl", True)
    ca_bundle = req_cfg.get("ca_bundle", None)
    if ca_bundle:
        verify_ssl = str(ca_bundle)
    return {
        "timeout_s": float(req_cfg.get("timeout_s", DEFAULT_TIMEOUT_S)),
        "verify_ssl": verify_ssl,
    }


def _discard(part: Path) -> None:
    with contextlib.suppress(OSError):
        part.unlink()


def download_file(
    url: str,
    dest: Path,
    *,
    timeout_s: float = DEFAULT_TIMEOUT_S,
    verify_ssl: Union[bool, str] = True,
    session: Optional[requests.Session] = None,
) -> bool:
    """
    Download `url` to `dest` unless `dest` already exists.

    Returns True if a download happened, False if the local copy was reused.
    Raises DownloadError on any HTTP, network, timeout or write failure.

    verify_ssl can be:
      - True (default): verify TLS certs
      - False: disable verification (not recommended; useful behind some proxies)
      - path to a CA bundle file
    """
    if dest.exists():
        logger.info("Using existing file: %s", dest)
        return False

    if verify_ssl is False:
        # Silence only the warning (we still want other warnings/errors)
        import urllib3

        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
        logger.warning("TLS verification disabled for %s (verify_ssl=False).", url)

    part = dest.with_name(dest.name + ".part")
    sess = session or requests.Session()

    logger.info("Downloading %s -> %s", url, dest)
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        with sess.get(url, stream=True, timeout=timeout_s, verify=verify_ssl) as resp:
            resp.raise_for_status()
            with part.open("wb") as f:
                for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
        part.replace(dest)
    except requests.Timeout as exc:
        _discard(part)
        raise DownloadError(f"Timed out after {timeout_s:g}s downloading {url}") from exc
    except requests.RequestException as exc:
        _discard(part)
        raise DownloadError(f"Failed to download {url}: {exc}") from exc
    except OSError as exc:
        _discard(part)
        raise DownloadError(f"Failed to write {dest}: {exc}") from exc
    finally:
        if session is None:
            sess.close()

    logger.info("Downloaded %s (%s bytes)", dest.name, f"{dest.stat().st_size:,}")
    return True
