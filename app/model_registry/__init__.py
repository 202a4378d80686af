# app/model_registry/__init__.py


# Register all models here

# User models
from app.users.user_models.user_model import User
from app.users.auth_token_model.token_model import Token

# System models
from app.system_models.patient_model.patient_model import Patient
from app.system_models.evolution_model.evolution_model import Evolution
from app.system_models.antibiotic_model.antibiotic_model import Antibiotic
from app.system_models.culture_model.culture_model import Culture
from app.system_models.alert_model.alert_model import Alert
from app.system_models.message_model.message_model import PatientMessage
from app.system_models.audit_model.audit_model import AuditLog
from app.system_models.template_model.template_model import Template
