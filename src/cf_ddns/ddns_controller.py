# ─── Standard library imports ───
from enum import Enum, auto
from typing import Iterable

# ─── Project imports ───
from .config import Config
from .telemetry import tlog
from .logger import get_logger
from .domains import DomainConfig
from .cloudflare import CloudflareClient
from .cache import load_cached_ip, store_ip
from .utils import get_public_ip, record_type_for, retry


class SyncResult(Enum):
    UNCHANGED = auto()   # current IP equals cached IP, no API call
    UPDATED = auto()     # Cloudflare updated and cache refreshed
    SKIPPED = auto()     # public IP unavailable for this family
    FAILED = auto()      # config or API failure, cache left as-is

    @property
    def emoji(self) -> str:
        return {
            SyncResult.UNCHANGED: "🟢",
            SyncResult.UPDATED: "🔄",
            SyncResult.SKIPPED: "🟡",
            SyncResult.FAILED: "🔴",
        }[self]


class DDNSController:
    """
    Keeps Cloudflare A/AAAA records in step with the current public IP.

    One pass per invocation, fully sequential:
        1. Detect the public IP for each requested family
        2. Compare against the last IP applied (local cache)
        3. On change only: look up the record ID, then PUT the new content,
           each phase retried with a fixed delay
        4. Refresh the cache only after a successful PUT

    A failed update never touches the cache, so the next run retries the
    same transition.
    """

    def __init__(
            self,
            max_retries: int | None = None,
            retry_delay: float | None = None,
            cache_dir=None,
            api_base_url: str | None = None,
        ):
        self.logger = get_logger("ddns_controller")

        # ─── Policy ───
        self.max_retries = Config.MAX_RETRIES if max_retries is None else max_retries
        self.retry_delay = Config.RETRY_DELAY if retry_delay is None else retry_delay
        if self.max_retries < 1:
            raise ValueError(f"max_retries must be at least 1, got {self.max_retries}")
        if self.retry_delay < 0:
            raise ValueError(f"retry_delay must not be negative, got {self.retry_delay}")

        # ─── Storage & External Interfaces ───
        self.cache_dir = cache_dir or Config.CACHE_DIR
        self.api_base_url = api_base_url

        # Public IPs are detected once per run and shared across domains
        self._ip_by_version: dict[str, str | None] = {}

    def current_ip(self, version: str) -> str | None:
        if version not in self._ip_by_version:
            self._ip_by_version[version] = get_public_ip(version)
        return self._ip_by_version[version]

    def run(
        self,
        domains: Iterable[DomainConfig],
        versions: Iterable[str] = ("ipv4", "ipv6"),
    ) -> bool:
        """
        Sync every domain for every requested IP version, in config order.

        Returns:
            True unless at least one domain/version ended FAILED.
        """
        versions = tuple(versions)
        ok = True

        for domain in domains:
            results = self.sync_domain(domain, versions)
            if SyncResult.FAILED in results.values():
                ok = False

        return ok

    def sync_domain(
        self,
        domain: DomainConfig,
        versions: Iterable[str] = ("ipv4", "ipv6"),
    ) -> dict[str, SyncResult]:
        """
        Sync one domain; a bad entry fails only itself.
        """
        versions = tuple(versions)

        try:
            resolved = domain.resolve_credentials()
        except ValueError as e:
            self.logger.error(str(e))
            return {version: SyncResult.FAILED for version in versions}

        client = CloudflareClient(resolved, api_base_url=self.api_base_url)
        return {version: self.sync_record(client, resolved, version) for version in versions}

    def sync_record(
        self,
        client: CloudflareClient,
        domain: DomainConfig,
        version: str,
    ) -> SyncResult:
        """
        The update decision for one (domain, record type) pair.
        """
        record_type = record_type_for(version)
        label = f"{domain.domain} ({record_type})"

        # ─── Observe ───
        current_ip = self.current_ip(version)
        if not current_ip:
            self.logger.warning(f"No public {version} address detected; skipping {label}")
            return self._report(SyncResult.SKIPPED, label, "no public IP")

        # ─── Compare (local, no network) ───
        cached_ip = load_cached_ip(domain.domain, record_type, self.cache_dir)
        if cached_ip == current_ip:
            return self._report(SyncResult.UNCHANGED, label, current_ip)

        self.logger.info(f"IP change for {label}: {cached_ip or 'none'} → {current_ip}")

        # ─── Phase 1: record lookup ───
        try:
            record_id = retry(
                lambda: client.get_record_id(record_type),
                attempts=self.max_retries,
                delay=self.retry_delay,
                label=f"Record lookup for {label}",
            )
        except Exception as e:
            self.logger.error(f"Giving up on {label}: record lookup failed ({e})")
            return self._report(SyncResult.FAILED, label, current_ip, meta="lookup failed")

        # ─── Phase 2: update ───
        try:
            retry(
                lambda: client.update_record(record_id, record_type, current_ip),
                attempts=self.max_retries,
                delay=self.retry_delay,
                label=f"Record update for {label}",
            )
        except Exception as e:
            self.logger.error(f"Giving up on {label}: update failed ({e})")
            return self._report(SyncResult.FAILED, label, current_ip, meta="update failed")

        # ─── Commit ───
        store_ip(domain.domain, record_type, current_ip, self.cache_dir)
        return self._report(
            SyncResult.UPDATED, label, current_ip,
            meta=f"was {cached_ip or 'none'} | ttl={domain.ttl} proxied={domain.proxied}",
        )

    def _report(
        self,
        result: SyncResult,
        label: str,
        primary: str,
        meta: str | None = None,
    ) -> SyncResult:
        tlog(self.logger, result.emoji, label, result.name, primary=primary, meta=meta)
        return result
