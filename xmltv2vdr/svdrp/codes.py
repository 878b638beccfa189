"""
xmltv2vdr.svdrp.codes - SVDRP commands and reply codes
"""

HELP = 214
EPG_DATA_RECORD = 215
SERVICE_READY = 220
SERVICE_CLOSING = 221
ACTION_OK = 250
EPG_START_SENDING = 354
ACTION_ABORTED = 451
SYNTAX_ERROR_COMMAND = 500
SYNTAX_ERROR_PARAMETER = 501
COMMAND_NOT_IMPLEMENTED = 502
PARAMETER_NOT_IMPLEMENTED = 504
ACTION_NOT_TAKEN = 550
TRANSACTION_FAILED = 554

STATUS_MESSAGES = {
    HELP: "Help message",
    EPG_DATA_RECORD: "EPG data record",
    SERVICE_READY: "VDR service ready",
    SERVICE_CLOSING: "VDR service closing transmission channel",
    ACTION_OK: "Requested VDR action okay, completed",
    EPG_START_SENDING: "Start sending EPG data",
    ACTION_ABORTED: "Requested action aborted: local error in processing",
    SYNTAX_ERROR_COMMAND: "Syntax error, command unrecognized",
    SYNTAX_ERROR_PARAMETER: "Syntax error in parameters or arguments",
    COMMAND_NOT_IMPLEMENTED: "Command not implemented",
    PARAMETER_NOT_IMPLEMENTED: "Command parameter not implemented",
    ACTION_NOT_TAKEN: "Requested action not taken",
    TRANSACTION_FAILED: "Transaction failed",
}

# Commands
CLEAR_EPG = "CLRE"
PUT_EPG = "PUTE"
QUIT = "QUIT"

# PUTE data lines
CHANNEL_END = "c"
DATA_END = "."


def describe(code) -> str:
    """Human readable text for a status code"""
    try:
        return STATUS_MESSAGES.get(int(code), "unknown status")
    except (TypeError, ValueError):
        return "unknown status"
