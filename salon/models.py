"""Imports every model module so their tables are registered on ``Base.metadata``."""
from salon.modules.availability import models as availability_models  # noqa: F401
from salon.modules.appointments import models as appointments_models  # noqa: F401
from salon.modules.catalog import models as catalog_models  # noqa: F401
from salon.modules.clients import models as clients_models  # noqa: F401
from salon.modules.notifications import models as notifications_models  # noqa: F401
from salon.modules.events import outbox as outbox_models  # noqa: F401
