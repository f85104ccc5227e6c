from .admin_user import AdminUser
from .app_link import AppLink
from .company_info import CompanyInfo
from .contact import Contact
from .department import Department
from .executive_message import ExecutiveMessage
from .it_tip import ITTip
from .news import News
from .otp_code import OtpChannel, OtpCode
from .policy import Policy, PolicyCategory
from .push_subscription import PushSubscription
from .refresh_token import RefreshToken
from .setting import Setting
from .suggestion import Suggestion, SuggestionCategory
from .token_blacklist import TokenBlacklist
from .toolbox_talk import ToolboxTalk
from .user import User

__all__ = [
    "AdminUser",
    "AppLink",
    "CompanyInfo",
    "Contact",
    "Department",
    "ExecutiveMessage",
    "ITTip",
    "News",
    "OtpChannel",
    "OtpCode",
    "Policy",
    "PolicyCategory",
    "PushSubscription",
    "RefreshToken",
    "Setting",
    "Suggestion",
    "SuggestionCategory",
    "TokenBlacklist",
    "ToolboxTalk",
    "User",
]
