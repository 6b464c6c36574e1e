VERSION = "0.1.0"

from lorgnette.callback import Callback
from lorgnette.deferred import Deferred, Promise, resolved, rejected
from lorgnette.aggregate import when, first_of
from lorgnette.core import (_o, o, Return, InvalidYieldException, Rejected,
                            launch, log_exception)
