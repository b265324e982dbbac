from .checker import VisibleExceptionPropagationCheck
from .statements import Verdict
from .throw_predicate import can_throw
