"""Advisory PHI/PII exposure checks over extracted text."""

import re

from intake.processor.models import ComplianceFlag, MedicalInfo

SSN_PATTERN = re.compile(r"\b\d{3}-\d{2}-\d{4}\b")
PAYMENT_CARD_PATTERN = re.compile(r"\b\d{4}[\s-]?\d{4}[\s-]?\d{4}[\s-]?\d{4}\b")


class ComplianceChecker:
    """Pure function of its inputs: the same text and entities always yield the same flags."""

    def check(self, text: str, medical_info: MedicalInfo | None) -> list[ComplianceFlag]:
        flags: list[ComplianceFlag] = []
        if medical_info is not None:
            if _occurs(medical_info.patient_name, text):
                flags.append(ComplianceFlag.PATIENT_NAME_EXPOSED)
            if _occurs(medical_info.patient_id, text):
                flags.append(ComplianceFlag.PATIENT_ID_EXPOSED)
            if _occurs(medical_info.date_of_birth, text):
                flags.append(ComplianceFlag.DOB_EXPOSED)
        if SSN_PATTERN.search(text):
            flags.append(ComplianceFlag.SSN_PATTERN_DETECTED)
        if PAYMENT_CARD_PATTERN.search(text):
            flags.append(ComplianceFlag.PAYMENT_CARD_PATTERN_DETECTED)
        return flags


def _occurs(value: str | None, text: str) -> bool:
    return bool(value) and value in text
