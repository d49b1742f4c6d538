from app.realtime.messaging import RealtimeMessaging, RealtimeError
from app.realtime.session import MessagingSession
from app.realtime.unread import UnreadCounter
