from fastapi import APIRouter

from intranet.api.v1 import (
    admin,
    app_links,
    auth,
    company_info,
    contacts,
    departments,
    executive_messages,
    health,
    it_tips,
    news,
    policies,
    policy_categories,
    push,
    settings,
    suggestion_categories,
    suggestions,
    toolbox_talks,
)


api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(push.router, prefix="/push", tags=["push"])
api_router.include_router(news.router, prefix="/news", tags=["news"])
api_router.include_router(toolbox_talks.router, prefix="/toolbox-talks", tags=["toolbox-talks"])
api_router.include_router(policies.router, prefix="/policies", tags=["policies"])
api_router.include_router(policy_categories.router, prefix="/policy-categories", tags=["policies"])
api_router.include_router(suggestions.router, prefix="/suggestions", tags=["suggestions"])
api_router.include_router(suggestion_categories.router, prefix="/suggestion-categories", tags=["suggestions"])
api_router.include_router(departments.router, prefix="/departments", tags=["directory"])
api_router.include_router(contacts.router, prefix="/contacts", tags=["directory"])
api_router.include_router(app_links.router, prefix="/app-links", tags=["app-links"])
api_router.include_router(it_tips.router, prefix="/it-tips", tags=["it-tips"])
api_router.include_router(executive_messages.router, prefix="/executive-messages", tags=["executive-messages"])
api_router.include_router(company_info.router, prefix="/company-info", tags=["company-info"])
api_router.include_router(settings.router, prefix="/settings", tags=["settings"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
