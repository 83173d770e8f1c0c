"""
Loggers for mudcolumn

Creates two logger instances, one for general model output and one for debug,
warning, error etc. messages.

To print to the model output stream, use :func:`~.print_output`.

Debug, warning etc. messages are issued with :func:`~.debug`, :func:`~.info`,
:func:`~.warning`, :func:`~.error`, :func:`~.critical` methods.
"""
import logging
from logging import DEBUG, INFO, WARNING, ERROR, CRITICAL
import os
import io

__all__ = ('logger', 'output_logger',
           'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL',
           'log', 'debug', 'info', 'warning', 'error', 'critical',
           'print_output', 'set_mudcolumn_loggers', 'mudcolumn_log_level',
           'set_log_directory')

logger_format = {
    'mudcolumn': '%(name)s:%(levelname)s %(message)s',
    'mudcolumn_output': '%(message)s',
}


class MudcolumnLogConfig:
    """Module-wide config object"""
    filename = None
    mem_buffer = None


mudcolumn_log_config = MudcolumnLogConfig()


class BufferHandler(logging.StreamHandler):
    pass


def set_mudcolumn_loggers():
    """Set stream handlers for log messages.

    Every logger gets a stderr handler and a handler that writes to an
    in-memory buffer. The buffer is flushed to disk once
    :func:`set_log_directory` is called.
    """
    def add_stream_handler(buffered=False):
        if buffered:
            handler = BufferHandler(mudcolumn_log_config.mem_buffer)
        else:
            handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=fmt))
        logger.addHandler(handler)

    if mudcolumn_log_config.mem_buffer is None:
        mudcolumn_log_config.mem_buffer = io.StringIO()

    for name, fmt in logger_format.items():
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            if isinstance(handler, logging.StreamHandler):
                logger.removeHandler(handler)

        add_stream_handler()
        add_stream_handler(buffered=True)


def set_log_directory(output_directory, mode='w'):
    """
    Forward all log output to `output_directory/log` file.

    When called, a new empty log file is created.

    If called twice with a different `output_directory`, a warning is raised,
    and the new log file location is assigned. The old log file or the
    `output_directory` are not removed.

    :arg output_directory: the directory where log file is stored
    :kwarg mode: write mode, 'w' removes previous log file (if any), otherwise
        appends to it. Default: 'w'.
    """
    def rm_handlers(cls=logging.FileHandler):
        for name in logger_format:
            logger = logging.getLogger(name)
            for handler in list(logger.handlers):
                if isinstance(handler, cls):
                    logger.removeHandler(handler)
                    handler.close()

    def assign_file_handler(logfile):
        for name, fmt in logger_format.items():
            logger = logging.getLogger(name)
            new_handler = logging.FileHandler(logfile, mode='a')
            new_handler.setFormatter(logging.Formatter(fmt))
            logger.addHandler(new_handler)

    logfile = os.path.join(output_directory, 'log')
    if mudcolumn_log_config.filename == logfile:
        # no change
        return
    different_file = mudcolumn_log_config.filename is not None
    if different_file:
        old_file = str(mudcolumn_log_config.filename)
        rm_handlers(cls=logging.FileHandler)
    if mode == 'w' and os.path.isfile(logfile):
        # silently remove previous log
        os.remove(logfile)
    if os.path.exists(output_directory):
        if not os.path.isdir(output_directory):
            raise IOError('file with same name exists', output_directory)
    else:
        os.makedirs(output_directory)
    buffer_content = ''
    if mudcolumn_log_config.mem_buffer is not None:
        buffer_content = mudcolumn_log_config.mem_buffer.getvalue()
    with open(logfile, 'w') as f:
        f.write(buffer_content)
    rm_handlers(cls=BufferHandler)
    mudcolumn_log_config.filename = logfile
    assign_file_handler(logfile)
    if different_file:
        msg = (f'Setting a log file "{logfile}" that differs from previous '
               f'"{old_file}", removing old handler')
        warning(msg)  # to new log


def mudcolumn_log_level(level):
    """Set the log level for the mudcolumn logger.

    This controls what level of logging messages are printed to
    stderr. The higher the level, the fewer the number of messages.

    :arg level: The level to use, one of 'DEBUG', 'INFO', 'WARNING', 'ERROR',
        'CRITICAL'.
    """
    logger = logging.getLogger('mudcolumn')
    logger.setLevel(level)


# logger for error, warning etc messages
logger = logging.getLogger('mudcolumn')
log = logger.log
debug = logger.debug
info = logger.info
warning = logger.warning
error = logger.error
critical = logger.critical

# logger for model output messages with no prefix, used with print_output
output_logger = logging.getLogger('mudcolumn_output')
output_logger.setLevel(INFO)
print_output = output_logger.info
