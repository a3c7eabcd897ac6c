"""
Structured logging for the transaction decoder.

JSON logs with timestamp, event_type and the tx_id / instruction_index /
program_id of the decode in progress. Use get_logger() in all modules.
"""

from txdecoder.decoder_logging.logger import get_logger, instruction_context, transaction_context

__all__ = ["get_logger", "instruction_context", "transaction_context"]
