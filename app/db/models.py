from app.db.base import Base

# Import all models here
from app.clinical.ichi.models import ICHIEntry

__all__ = ["Base", "ICHIEntry"]
