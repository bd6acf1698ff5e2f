# app/models/__init__.py
# Import all models so Base.metadata knows every table

from app.db.base_class import Base
from app.models.user import User
from app.models.party import Party
from app.models.supplier import Supplier
from app.models.enquiry import Enquiry
from app.models.urgent_alert import UrgentAlert
from app.models.supplier_response import SupplierResponse
from app.models.supplier_message_template import SupplierMessageTemplate
