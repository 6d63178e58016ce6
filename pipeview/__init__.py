from .controller import SimulationController
from .decoder import DecodedInstruction, InstructionKind, decode, disassemble
from .driver import TickDriver, run_to_completion
from .errors import ConfigError, EmptyProgramError, PipeviewError, ProgramFormatError, TraceError
from .hazards import ForwardingEdge, HazardKind, HazardRecord, HazardReport, analyze, summarize
from .pipeline import STAGES, PipelineState, advance

__version__ = "0.1.0"
