from datetime import date, datetime
import pytz

import config

# Centralized Timezone Configuration
HOTEL_TZ = pytz.timezone(config.HOTEL_TIMEZONE)


def get_hotel_now() -> datetime:
    """Returns current time in Hotel Timezone"""
    return datetime.now(HOTEL_TZ)


def get_hotel_today() -> date:
    """Calendar date in the hotel, used for cancellation windows and default months"""
    return get_hotel_now().date()
