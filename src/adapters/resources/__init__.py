"""Wrappers tipados de los recursos REST del backend.

Por qué un paquete:
- Agrupa un módulo por recurso (chat, users, posts, ...).
- Todos pasan por `SecureApiClient`, así que heredan token, reintento y
  clasificación de errores sin repetir lógica.
"""

from adapters.resources.auth import AuthApi
from adapters.resources.captions import CaptionsApi
from adapters.resources.chat import ChatApi
from adapters.resources.dashboard import DashboardApi
from adapters.resources.images import ImagesApi
from adapters.resources.posts import PostsApi
from adapters.resources.quotes import QuotesApi
from adapters.resources.templates import TemplatesApi
from adapters.resources.users import UsersApi

__all__ = [
	"AuthApi",
	"CaptionsApi",
	"ChatApi",
	"DashboardApi",
	"ImagesApi",
	"PostsApi",
	"QuotesApi",
	"TemplatesApi",
	"UsersApi",
]
