# Namespace for pipeline steps
from .acquire_content import AcquireContent  # noqa: F401
from .extract_fields import ExtractFields  # noqa: F401
from .resolve_contacts import ResolveContacts  # noqa: F401
from .assemble_record import AssembleRecord  # noqa: F401
