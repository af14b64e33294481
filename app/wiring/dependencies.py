from datetime import datetime
import logging
from zoneinfo import ZoneInfo

from app.core.config import settings
from app.application.ports.booking_notifier import BookingNotifierPort
from app.application.ports.data_store import DataStorePort
from app.application.ports.email_sender import EmailSenderPort
from app.application.ports.settings_store import SettingsStorePort
from app.application.use_cases.booking_email import SendBookingEmailUseCase
from app.application.use_cases.booking_reminders import SendBookingRemindersUseCase
from app.application.use_cases.contact_notification import SendContactNotificationUseCase
from app.application.use_cases.reminder_eligibility import ReminderEligibilityEngine
from app.application.use_cases.send_reminder import SendReminderUseCase
from app.application.use_cases.studio_settings import StudioSettingsService
from app.application.use_cases.translations import TranslationAdmin, TranslationResolver
from app.infrastructure.email.booking_email_function import BookingEmailFunctionClient
from app.infrastructure.email.brevo_client import BrevoEmailSender
from app.infrastructure.email.local_notifier import InProcessBookingNotifier
from app.infrastructure.email.mock_sender import MockEmailSender
from app.infrastructure.store.json_settings_store import JsonSettingsStore
from app.infrastructure.store.memory_data_store import MemoryDataStore
from app.infrastructure.store.supabase_data_store import SupabaseDataStore


_data_store: DataStorePort | None = None
_settings_store: SettingsStorePort | None = None
_email_sender: EmailSenderPort | None = None
_translation_resolver: TranslationResolver | None = None


def studio_now() -> datetime:
    """Current wall-clock time in the studio's timezone, as a naive datetime."""
    return datetime.now(ZoneInfo(settings.STUDIO_TIMEZONE)).replace(tzinfo=None)


def get_data_store() -> DataStorePort:
    global _data_store
    if _data_store is None:
        logger = logging.getLogger(__name__)
        if settings.SUPABASE_URL and settings.SUPABASE_SERVICE_ROLE_KEY:
            logger.info("Using SupabaseDataStore")
            _data_store = SupabaseDataStore(url=settings.SUPABASE_URL, key=settings.SUPABASE_SERVICE_ROLE_KEY)
        elif settings.is_dev:
            logger.info("Using MemoryDataStore (Supabase credentials missing, ENV=dev/local)")
            _data_store = MemoryDataStore()
        else:
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are required outside dev.")
    return _data_store


def get_settings_store() -> SettingsStorePort:
    global _settings_store
    if _settings_store is None:
        _settings_store = JsonSettingsStore(path=settings.SETTINGS_FILE)
    return _settings_store


def get_email_sender() -> EmailSenderPort:
    global _email_sender
    if _email_sender is None:
        logger = logging.getLogger(__name__)
        if settings.BREVO_API_KEY:
            logger.info("Using BrevoEmailSender")
            _email_sender = BrevoEmailSender(api_key=settings.BREVO_API_KEY, api_url=settings.BREVO_API_URL)
        elif settings.is_dev:
            logger.info("Using MockEmailSender (BREVO_API_KEY missing, ENV=dev/local)")
            _email_sender = MockEmailSender()
        else:
            raise ValueError("BREVO_API_KEY is required to send email.")
    return _email_sender


def get_studio_settings() -> StudioSettingsService:
    return StudioSettingsService(store=get_data_store())


def get_reminder_engine() -> ReminderEligibilityEngine:
    return ReminderEligibilityEngine()


def get_translation_resolver() -> TranslationResolver:
    global _translation_resolver
    if _translation_resolver is None:
        resolver = TranslationResolver(store=get_data_store(), settings_store=get_settings_store())
        resolver.refresh()
        resolver.watch_store()
        _translation_resolver = resolver
    return _translation_resolver


def get_translation_admin() -> TranslationAdmin:
    return TranslationAdmin(store=get_data_store(), resolver=get_translation_resolver())


def get_send_booking_email_use_case() -> SendBookingEmailUseCase:
    return SendBookingEmailUseCase(
        sender=get_email_sender(),
        studio_settings=get_studio_settings(),
        sender_email=settings.SENDER_EMAIL,
        admin_email=settings.ADMIN_EMAIL,
        send_delay_seconds=settings.REMINDER_SEND_DELAY_SECONDS,
    )


def get_send_contact_notification_use_case() -> SendContactNotificationUseCase:
    return SendContactNotificationUseCase(
        sender=get_email_sender(),
        sender_email=settings.SENDER_EMAIL,
        send_delay_seconds=settings.REMINDER_SEND_DELAY_SECONDS,
    )


def get_booking_notifier() -> BookingNotifierPort:
    function_url = settings.BOOKING_EMAIL_FUNCTION_URL
    if not function_url and settings.SUPABASE_URL and settings.SUPABASE_ANON_KEY:
        function_url = f"{settings.SUPABASE_URL.rstrip('/')}/functions/v1/send-booking-email"
    if function_url:
        return BookingEmailFunctionClient(function_url=function_url, anon_key=settings.SUPABASE_ANON_KEY)
    return InProcessBookingNotifier(use_case=get_send_booking_email_use_case())


def get_booking_reminders_use_case() -> SendBookingRemindersUseCase:
    return SendBookingRemindersUseCase(
        store=get_data_store(),
        notifier=get_booking_notifier(),
        engine=get_reminder_engine(),
        studio_settings=get_studio_settings(),
        clock=studio_now,
        admin_email=settings.ADMIN_EMAIL,
        send_delay_seconds=settings.REMINDER_SEND_DELAY_SECONDS,
    )


def get_send_reminder_use_case() -> SendReminderUseCase:
    return SendReminderUseCase(
        store=get_data_store(),
        notifier=get_booking_notifier(),
        engine=get_reminder_engine(),
        studio_settings=get_studio_settings(),
        clock=studio_now,
        admin_email=settings.ADMIN_EMAIL,
    )
