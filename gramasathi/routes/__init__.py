from .auth_routes import auth_bp
from .core_routes import core
from .campaign_routes import campaigns
from .profile_routes import profile_bp
from .camp_routes import camps_bp
from .admin_routes import admin_bp

__all__ = ["auth_bp", "core", "campaigns", "profile_bp", "camps_bp", "admin_bp"]
