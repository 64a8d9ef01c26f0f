from .pauli import Pauli
from .errors import SurfaceLogicError, InvalidDimension, EngineFailure
from .core.lattice import StabilizerType, DataSite, SyndromeSite, Lattice, build_lattice
from .core.syndrome_history import ParityChangeReport, SyndromeHistory
from .core.round_driver import RoundCursor, SyndromeSchedule, RunResult, run_rounds
from .engines.frame_engine import FrameEngine
from .engines.stim_engine import StimEngine

__all__ = [
	"Pauli",
	"SurfaceLogicError",
	"InvalidDimension",
	"EngineFailure",
	"StabilizerType",
	"DataSite",
	"SyndromeSite",
	"Lattice",
	"build_lattice",
	"ParityChangeReport",
	"SyndromeHistory",
	"RoundCursor",
	"SyndromeSchedule",
	"RunResult",
	"run_rounds",
	"FrameEngine",
	"StimEngine",
]
