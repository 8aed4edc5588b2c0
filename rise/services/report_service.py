# rise/services/report_service.py
"""Pending student reports and mentor confirmation of class records."""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

from rise.config import Config
from rise.errors import UpstreamError, ValidationError
from rise.models import ConfirmationStatus, ReportStatus
from rise.services.record_store import RecordStore

logger = logging.getLogger(__name__)


class ReportService:
    def __init__(self, config: Config, store: RecordStore):
        self.config = config
        self.store = store

    def pending_reports(self) -> Dict[str, Any]:
        """Reports with Status = Pending, grouped by counselor email."""
        self.config.require("REPORTS_BASE_ID", "REPORTS_TABLE_ID")
        logger.info("📋 Fetching pending student reports...")
        records = self.store.fetch(
            self.config.REPORTS_BASE_ID,
            self.config.REPORTS_TABLE_ID,
            match={"Status": ReportStatus.PENDING.value},
        )

        grouped: Dict[str, Dict[str, Any]] = {}
        for record in records:
            fields = record.get("fields", {})
            counselor_email = fields.get("Counselor Email") or "No Email"
            group = grouped.setdefault(
                counselor_email,
                {"counselorEmail": counselor_email, "reports": [], "totalReports": 0},
            )
            group["reports"].append(
                {
                    "id": record.get("id"),
                    "programId": fields.get("Program ID", ""),
                    "studentName": fields.get("Student Name", ""),
                    "counselorMessage": fields.get("Counsellor Message", ""),
                    "meetingsTable": fields.get("Meetings HTML Table", ""),
                    "weeklySummary": fields.get("Weekly Summary", ""),
                    "status": ReportStatus.parse(fields.get("Status")).value,
                }
            )
            group["totalReports"] += 1

        for email, group in grouped.items():
            logger.info(f"📧 {email}: {group['totalReports']} pending reports")

        return {
            "success": True,
            "totalReports": len(records),
            "counselorCount": len(grouped),
            "groupedData": grouped,
        }

    def set_class_confirmation(
        self,
        program_id: str,
        class_ids: List[str],
        status: ConfirmationStatus,
        issues: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Patch ``Mentor Confirmation`` on each class; failed records are counted, not raised."""
        if not program_id:
            raise ValidationError("programId is required", field="programId")
        if not isinstance(class_ids, list) or not class_ids:
            raise ValidationError("classIds must be a non-empty array", field="classIds")
        if status is ConfirmationStatus.ISSUE_RAISED and not issues:
            raise ValidationError("issues is required", field="issues")
        self.config.require("INVOICING_BASE_ID")

        fields: Dict[str, Any] = {"Mentor Confirmation": status.value}
        if issues:
            fields["Issues"] = issues

        def update(record_id: str) -> bool:
            try:
                self.store.update(
                    self.config.INVOICING_BASE_ID,
                    self.config.CLASSES_TABLE,
                    record_id,
                    fields,
                )
                logger.info(f"   ✅ Updated record: {record_id}")
                return True
            except UpstreamError as e:
                logger.error(f"   ❌ Failed to update record {record_id}: {e.message}")
                return False

        with ThreadPoolExecutor(max_workers=self.config.STORE_MAX_WORKERS) as pool:
            updated_count = sum(pool.map(update, class_ids))

        logger.info(
            f"✅ Updated {updated_count}/{len(class_ids)} class records to '{status.value}'"
        )
        return {
            "success": True,
            "programId": program_id,
            "updatedCount": updated_count,
            "totalClasses": len(class_ids),
        }
