import lorgnette
from lorgnette import Deferred, when, _o

# stand-ins for whatever would settle these later: a timer, a socket...
pending = [Deferred(), Deferred(), Deferred()]

@_o
def main():
    both = when(pending[0], pending[1], "already here")
    both.progress(lambda *statuses: print("progress:", statuses))
    a, b, c = yield both
    print("all done:", a, b, c)

    doubled = yield pending[2].pipe(lambda v: Deferred().resolve(v * 2))
    print("piped:", doubled)

lorgnette.launch(main)
pending[0].notify("halfway")
pending[1].resolve("second")
pending[0].resolve("first")
pending[2].resolve(21)
