import logging
import sys
# Configure logging format
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

def setup_logger(name: str, level=logging.INFO) -> logging.Logger:
    """
    Sets up a logger with consistent formatting.
    
    Args:
        name: Name of the logger (typically __name__ from the calling module)
        level: Logging level (default: INFO)
    
    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    
    # Avoid adding handlers multiple times
    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        
        formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
        console_handler.setFormatter(formatter)
        
        logger.addHandler(console_handler)
    
    return logger

def set_log_level(level: int):
    """
    Changes the level of every logger created through setup_logger.

    Args:
        level: New logging level, e.g. logging.DEBUG
    """
    for logger in logging.Logger.manager.loggerDict.values():
        if not isinstance(logger, logging.Logger):
            continue
        for handler in logger.handlers:
            handler.setLevel(level)
        if logger.handlers:
            logger.setLevel(level)

def log_telegram_message_sent(logger: logging.Logger, chat_id: str, text: str):
    """
    Logs a sent Telegram message.
    
    Args:
        logger: Logger instance to use
        chat_id: Chat ID where message was sent
        text: Message text
    """
    logger.info(f"📤 Telegram Message Sent - Chat: {chat_id}")
    logger.info(f"  Text: {text[:200]}{'...' if len(text) > 200 else ''}")
