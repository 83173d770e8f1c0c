from mudcolumn.utility import *
from mudcolumn.log import *
import mudcolumn.solver as solver  # NOQA
from mudcolumn.solver import FlowSolver1DV  # NOQA
from mudcolumn.options import ModelOptions  # NOQA
from mudcolumn.callback import DiagnosticCallback, VerticalProfileCallback  # NOQA
from mudcolumn.callback import SedimentMassConservationCallback, FieldRangeCallback  # NOQA
from mudcolumn.tidal_forcing import TidalForcingM2M4  # NOQA
from mudcolumn.exporter import ColumnHistory  # NOQA
import mudcolumn.closures as closures  # NOQA
import mudcolumn.timezone as timezone  # NOQA
import os  # NOQA
import datetime  # NOQA
import numpy  # NOQA

__version__ = '0.1.0'

mudcolumn_log_level(INFO)
set_mudcolumn_loggers()
