# marketplace_chat/infrastructure/database/models/__init__.py
# imported for side effects: registers every table on BaseModel.metadata

from marketplace_chat.infrastructure.database.models.audit_log_model import AuditLogModel  # noqa: F401
from marketplace_chat.infrastructure.database.models.conversation_model import ConversationModel  # noqa: F401
from marketplace_chat.infrastructure.database.models.message_model import MessageModel  # noqa: F401
from marketplace_chat.infrastructure.database.models.order_model import OrderModel  # noqa: F401
from marketplace_chat.infrastructure.database.models.product_model import ProductModel  # noqa: F401
from marketplace_chat.infrastructure.database.models.session_model import SessionModel  # noqa: F401
from marketplace_chat.infrastructure.database.models.user_model import UserModel  # noqa: F401
