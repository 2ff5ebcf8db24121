from blockcms.controllers.auth import AuthController
from blockcms.controllers.web import WebController

__all__ = ["AuthController", "WebController"]
