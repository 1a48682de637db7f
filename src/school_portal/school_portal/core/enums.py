from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for access control.

    Values are the strings stored in the `role` field of a user profile.
    """

    ADMIN = "admin"
    STAFF = "guru"


class Duty(str, Enum):
    """Additional responsibility tags (``tugasTambahan``) on a staff profile."""

    PRINCIPAL = "kepala_sekolah"
    HEAD_OF_ADMINISTRATION = "kepala_tata_usaha"
    CURRICULUM = "kurikulum"
    STUDENT_AFFAIRS = "kesiswaan"
    TREASURER = "bendahara"
    OPERATOR = "operator"
    COUNSELOR = "bk"
    ADMIN_STAFF = "staf_tu"
    SECURITY = "satpam"
    CARETAKER = "penjaga_sekolah"
    OSIS_ADVISOR = "pembina_osis"
    PMR_ADVISOR = "pembina_eskul_pmr"
    PASKIBRA_ADVISOR = "pembina_eskul_paskibra"
    PRAMUKA_ADVISOR = "pembina_eskul_pramuka"
    KARAWITAN_ADVISOR = "pembina_eskul_karawitan"
    PENCAK_SILAT_ADVISOR = "pembina_eskul_pencak_silat"
    VOLLEYBALL_ADVISOR = "pembina_eskul_volly_ball"


class DailyAttendanceStatus(str, Enum):
    """Status kehadiran harian guru, disimpan apa adanya di database."""

    PRESENT = "Hadir"
    PERMITTED = "Izin"
    SICK = "Sakit"
    ABSENT = "Alpa"


class RunOutcome(str, Enum):
    """How a reminder run ended."""

    SENT = "SENT"
    NO_STAFF = "NO_STAFF"
    NO_PENDING = "NO_PENDING"
    FAILED = "FAILED"
