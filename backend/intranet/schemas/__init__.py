from .app_link import AppLinkCreate, AppLinkRead, AppLinkUpdate
from .auth import (
    AdminLogin,
    AdminRead,
    AdminToken,
    EmailOtpRequest,
    EmailOtpVerifyRequest,
    LogoutRequest,
    OtpRequest,
    OtpRequestResponse,
    OtpVerifyRequest,
    RefreshTokenRequest,
    SessionRead,
    TokenPair,
)
from .company_info import CompanyInfoRead, CompanyInfoUpdate, CoreValue
from .dashboard import DashboardRead
from .directory import (
    ContactCreate,
    ContactRead,
    ContactUpdate,
    DepartmentCreate,
    DepartmentRead,
    DepartmentUpdate,
)
from .executive_message import ExecutiveMessageCreate, ExecutiveMessageRead, ExecutiveMessageUpdate
from .it_tip import ITTipCreate, ITTipRead, ITTipUpdate
from .news import NewsCreate, NewsRead, NewsUpdate
from .pagination import PaginatedResponse
from .policy import (
    CategoryOrder,
    PolicyCategoryCreate,
    PolicyCategoryRead,
    PolicyCategoryUpdate,
    PolicyCreate,
    PolicyRead,
    PolicyStats,
    PolicyUpdate,
)
from .push_subscription import PushSubscriptionCreate, PushSubscriptionRead, PushTestRequest, PushUnsubscribe
from .setting import PublicSettings, SettingsUpdate
from .suggestion import (
    SuggestionCategoryCreate,
    SuggestionCategoryRead,
    SuggestionCategoryUpdate,
    SuggestionCreate,
    SuggestionRead,
    SuggestionUpdate,
)
from .toolbox_talk import ToolboxTalkCreate, ToolboxTalkRead, ToolboxTalkUpdate
from .user import UserCreate, UserRead, UserUpdate, UserWithTokens

__all__ = [
    "AdminLogin",
    "AdminRead",
    "AdminToken",
    "AppLinkCreate",
    "AppLinkRead",
    "AppLinkUpdate",
    "CategoryOrder",
    "CompanyInfoRead",
    "CompanyInfoUpdate",
    "ContactCreate",
    "ContactRead",
    "ContactUpdate",
    "CoreValue",
    "DashboardRead",
    "DepartmentCreate",
    "DepartmentRead",
    "DepartmentUpdate",
    "EmailOtpRequest",
    "EmailOtpVerifyRequest",
    "ExecutiveMessageCreate",
    "ExecutiveMessageRead",
    "ExecutiveMessageUpdate",
    "ITTipCreate",
    "ITTipRead",
    "ITTipUpdate",
    "LogoutRequest",
    "NewsCreate",
    "NewsRead",
    "NewsUpdate",
    "OtpRequest",
    "OtpRequestResponse",
    "OtpVerifyRequest",
    "PaginatedResponse",
    "PolicyCategoryCreate",
    "PolicyCategoryRead",
    "PolicyCategoryUpdate",
    "PolicyCreate",
    "PolicyRead",
    "PolicyStats",
    "PolicyUpdate",
    "PublicSettings",
    "PushSubscriptionCreate",
    "PushSubscriptionRead",
    "PushTestRequest",
    "PushUnsubscribe",
    "RefreshTokenRequest",
    "SessionRead",
    "SettingsUpdate",
    "SuggestionCategoryCreate",
    "SuggestionCategoryRead",
    "SuggestionCategoryUpdate",
    "SuggestionCreate",
    "SuggestionRead",
    "SuggestionUpdate",
    "TokenPair",
    "ToolboxTalkCreate",
    "ToolboxTalkRead",
    "ToolboxTalkUpdate",
    "UserCreate",
    "UserRead",
    "UserUpdate",
    "UserWithTokens",
]
