import hashlib
from datetime import datetime


def md5_hex(text):
    """Hashes a text using MD5.

    Args:
        text (str): The text to hash.

    Returns:
        str: The digest in hexadecimal format.
    """
    return hashlib.md5(text.encode('utf-8')).hexdigest()


def format_log_time(moment=None):
    """Formats a time as HH:MM, the timestamp used in log lines.

    Args:
        moment (datetime): Time to format. Defaults to now.

    Returns:
        str: The formatted time.
    """
    return (moment or datetime.now()).strftime('%H:%M')
