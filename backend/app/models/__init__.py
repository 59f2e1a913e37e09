from app.models.community import CommunityResource, CommunityStat, Event  # noqa: F401
from app.models.conversation import ChatMessage, Conversation, Feedback  # noqa: F401
