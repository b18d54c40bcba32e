# repair_cafe/crud/__init__.py

from .crud_demographics import demographics
from .crud_event import event
from .crud_fixer import fixer
from .crud_fixer_interest import fixer_interest
from .crud_helper import helper
from .crud_item import item
from .crud_item_comment import item_comment
from .crud_item_feedback import item_feedback
from .crud_notification_preference import notification_preference
from .crud_registration import registration
from .crud_skill import skill
from .crud_user import user
from .crud_venue import venue
