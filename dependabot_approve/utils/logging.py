import logging
import os
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING, Optional, Union

import bittensor as bt

if TYPE_CHECKING:
    from dependabot_approve.classes import ApprovalOutcome, DismissalOutcome

EVENTS_LEVEL_NUM = 38
EVENTS_LOGGER_NAME = 'dependabot_approve.events'
DEFAULT_LOG_BACKUP_COUNT = 10
DEFAULT_EVENTS_RETENTION_SIZE = 5 * 1024 * 1024


def setup_logging(verbose: bool = False) -> None:
    """Route diagnostics through bittensor logging; debug output only with --verbose."""
    bt.logging.set_debug(verbose)


def setup_events_logger(full_path: str, events_retention_size: int = DEFAULT_EVENTS_RETENTION_SIZE) -> logging.Logger:
    """Create the rotating events log used to audit approvals and dismissals."""
    logging.addLevelName(EVENTS_LEVEL_NUM, 'EVENT')

    logger = logging.getLogger(EVENTS_LOGGER_NAME)
    logger.setLevel(EVENTS_LEVEL_NUM)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    def event(self, message, *args, **kws):
        if self.isEnabledFor(EVENTS_LEVEL_NUM):
            self._log(EVENTS_LEVEL_NUM, message, args, **kws)

    logging.Logger.event = event

    formatter = logging.Formatter(
        '%(asctime)s | %(levelname)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )

    os.makedirs(full_path, exist_ok=True)
    file_handler = RotatingFileHandler(
        os.path.join(full_path, 'events.log'),
        maxBytes=events_retention_size,
        backupCount=DEFAULT_LOG_BACKUP_COUNT,
    )
    file_handler.setFormatter(formatter)
    file_handler.setLevel(EVENTS_LEVEL_NUM)
    logger.addHandler(file_handler)

    return logger


def log_outcome_event(
    logger: Optional[logging.Logger],
    repository: str,
    outcome: Union['ApprovalOutcome', 'DismissalOutcome'],
) -> None:
    """Write one outcome line to the events log, if one is configured."""
    if logger is None:
        return

    if hasattr(outcome, 'candidate'):
        action = 'approve'
        target = f'{repository}#{outcome.candidate.number}'
    else:
        action = 'dismiss'
        target = f'{repository}#{outcome.review.pr_number} review {outcome.review.id}'

    if outcome.dry_run:
        result = 'dry-run'
    elif outcome.succeeded:
        result = 'ok'
    else:
        result = f'failed: {outcome.failure_detail}'

    logger.event(f'{action} | {target} | {result}')
