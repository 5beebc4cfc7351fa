from .acquired_content import AcquiredContent, AcquisitionMethod
from .executive import ExecutiveCandidate, ExecutiveContacts
from .extracted_fields import Classification, ExtractedFields
from .final_record import FinalRecord

__all__ = [
    "AcquiredContent",
    "AcquisitionMethod",
    "Classification",
    "ExecutiveCandidate",
    "ExecutiveContacts",
    "ExtractedFields",
    "FinalRecord",
]
