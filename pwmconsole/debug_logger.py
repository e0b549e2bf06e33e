"""
debug_logger.py

Centralised console logging for calculator events. Supports colour and timestamp output.
"""

import time

COLOURS = {
    'INFO': '\033[94m',
    'WARN': '\033[93m',
    'ERROR': '\033[91m',
    'ENDC': '\033[0m',
}

# Set False when output is piped or captured
USE_COLOUR = True


def format_line(level: str, message: str) -> str:
    ts = time.strftime('%H:%M:%S')
    colour = COLOURS.get(level, '') if USE_COLOUR else ''
    endc = COLOURS['ENDC'] if colour else ''
    return f"{colour}[{level}] {ts} {message}{endc}"


def log(level: str, message: str):
    print(format_line(level, message))

def info(msg):
    log('INFO', msg)

def warn(msg):
    log('WARN', msg)

def error(msg):
    log('ERROR', msg)
