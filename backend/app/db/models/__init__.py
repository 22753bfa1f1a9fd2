"""
Models package — re-exports Base and all models.

Import models here so Alembic's `target_metadata = Base.metadata`
picks up every table automatically.

When adding a new model:
    1. Create `app/db/models/<table_name>.py`
    2. Import it here
"""

from app.db.models.base import Base
from app.db.models.claim import Claim
from app.db.models.client import Client
from app.db.models.endorsement import Endorsement
from app.db.models.import_batch import ImportBatch
from app.db.models.lob import Lob, SubLob
from app.db.models.note import CoInsuranceShare, Note
from app.db.models.policy import Policy
from app.db.models.sequence_counter import SequenceCounter

__all__ = [
    "Base",
    "Claim",
    "Client",
    "CoInsuranceShare",
    "Endorsement",
    "ImportBatch",
    "Lob",
    "Note",
    "Policy",
    "SequenceCounter",
    "SubLob",
]
