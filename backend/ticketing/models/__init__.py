# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant que SQLAlchemy tente de résoudre les clés étrangères inter-modèles.
# Sans cet import, ticket_devices.batch_device_id → batch_devices.id échoue
# avec NoReferencedTableError si batch.py n'est pas chargé avant ticket.py.

from ticketing.models.user import User  # noqa: F401
from ticketing.models.batch import Batch, BatchDevice, DeviceType  # noqa: F401 (doit précéder ticket)
from ticketing.models.ticket import Ticket, TicketDevice  # noqa: F401
from ticketing.models.issue import Issue  # noqa: F401
from ticketing.models.account_request import AccountRequest, AccountResetRequest, IdasResetRequest  # noqa: F401
