# repair_cafe/models/__init__.py
# Import all models to ensure SQLAlchemy can resolve relationships
# Order matters for dependencies - import base models first

from repair_cafe.db.base_class import Base
from repair_cafe.models.skill import Skill, user_skills
from repair_cafe.models.user import User
from repair_cafe.models.auth_token import AuthToken
from repair_cafe.models.venue import Venue
from repair_cafe.models.event import Event
from repair_cafe.models.registration import Registration
from repair_cafe.models.item import Item
from repair_cafe.models.fixer import Fixer, FixerEventRsvp
from repair_cafe.models.helper import Helper
from repair_cafe.models.notification_preference import NotificationPreference
from repair_cafe.models.notification_outbox import NotificationOutbox
from repair_cafe.models.item_comment import ItemComment
from repair_cafe.models.item_feedback import ItemFeedback
from repair_cafe.models.fixer_interest import FixerInterest
from repair_cafe.models.registration_demographics import RegistrationDemographics
