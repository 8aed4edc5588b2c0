# rise/services/record_store.py
"""
Record store access for the Airtable bases.

Services depend on the small ``RecordStore`` interface (filtered reads,
record creation and patching) so tests can hand in an in-memory store.
``AirtableRecordStore`` is the production implementation on pyairtable.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional

import requests
from pyairtable import Api
from pyairtable.formulas import AND, EQUAL, FIELD, LOWER, STR_VALUE
from urllib3.util.retry import Retry

from rise.config import Config
from rise.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


class RecordStore:
    """Interface every record store implements."""

    def fetch(
        self,
        base_id: str,
        table: str,
        match: Optional[Mapping[str, str]] = None,
        ignore_case: bool = False,
    ) -> List[Record]:
        """Return records whose fields equal every value in ``match``."""
        raise NotImplementedError

    def create(self, base_id: str, table: str, fields: Dict[str, Any]) -> Record:
        raise NotImplementedError

    def update(
        self, base_id: str, table: str, record_id: str, fields: Dict[str, Any]
    ) -> Record:
        raise NotImplementedError


def build_formula(match: Mapping[str, str], ignore_case: bool = False) -> Optional[str]:
    """Airtable formula for field equality; ``ignore_case`` compares LOWER() of both sides."""
    clauses = []
    for field_name, value in match.items():
        if ignore_case:
            clauses.append(
                EQUAL(LOWER(FIELD(field_name)), STR_VALUE(str(value).strip().lower()))
            )
        else:
            clauses.append(EQUAL(FIELD(field_name), STR_VALUE(str(value))))
    if not clauses:
        return None
    if len(clauses) == 1:
        return clauses[0]
    return AND(*clauses)


class AirtableRecordStore(RecordStore):
    """pyairtable-backed store.

    Reads retry ``AIRTABLE_GET_RETRIES`` times on connection errors and 5xx
    responses; writes are never retried since a record create is not
    idempotent.
    """

    def __init__(self, config: Config):
        self.config = config
        self.api_key = config.AIRTABLE_PERSONAL_ACCESS_TOKEN
        timeout = config.AIRTABLE_TIMEOUT_SECONDS
        retries = Retry(
            total=config.AIRTABLE_GET_RETRIES,
            connect=config.AIRTABLE_GET_RETRIES,
            read=config.AIRTABLE_GET_RETRIES,
            status=config.AIRTABLE_GET_RETRIES,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=frozenset({"GET"}),
            backoff_factor=0.3,
            raise_on_status=False,
        )
        self.api = Api(self.api_key, timeout=(timeout, timeout), retry_strategy=retries)
        logger.debug("AirtableRecordStore initialized")

    def _table(self, base_id: str, table: str):
        self.config.require("AIRTABLE_PERSONAL_ACCESS_TOKEN")
        if not base_id or not table:
            raise ConfigurationError(
                f"Airtable base/table not configured (base='{base_id}', table='{table}')"
            )
        return self.api.table(base_id, table)

    def _wrap(self, action: str, table: str, error: Exception) -> UpstreamError:
        if isinstance(error, requests.HTTPError) and error.response is not None:
            status = error.response.status_code
            reason = error.response.reason
            logger.error(f"❌ Airtable {action} on {table} failed: {status} {reason}")
            return UpstreamError(
                f"Airtable API error: {status} {reason}",
                upstream_status=status,
                retryable=status >= 500 or status == 429,
            )
        logger.error(f"❌ Airtable {action} on {table} failed: {str(error)}")
        return UpstreamError(f"Airtable unreachable: {str(error)}", retryable=True)

    def fetch(
        self,
        base_id: str,
        table: str,
        match: Optional[Mapping[str, str]] = None,
        ignore_case: bool = False,
    ) -> List[Record]:
        airtable_table = self._table(base_id, table)
        formula = build_formula(match or {}, ignore_case=ignore_case)
        logger.info(f"🔄 Airtable GET {table} {formula or '(all records)'}")
        try:
            if formula:
                records = airtable_table.all(formula=formula)
            else:
                records = airtable_table.all()
        except requests.RequestException as e:
            raise self._wrap("fetch", table, e)
        logger.info(f"📥 Airtable GET {table}: {len(records)} records")
        return records

    def create(self, base_id: str, table: str, fields: Dict[str, Any]) -> Record:
        airtable_table = self._table(base_id, table)
        logger.info(f"🔄 Airtable POST {table}, fields: {list(fields.keys())}")
        try:
            record = airtable_table.create(fields)
        except requests.RequestException as e:
            raise self._wrap("create", table, e)
        logger.info(f"✅ Airtable record created: {record.get('id')}")
        return record

    def update(
        self, base_id: str, table: str, record_id: str, fields: Dict[str, Any]
    ) -> Record:
        airtable_table = self._table(base_id, table)
        logger.info(f"✏️ Airtable PATCH {table}/{record_id}")
        try:
            return airtable_table.update(record_id, fields)
        except requests.RequestException as e:
            raise self._wrap("update", table, e)
