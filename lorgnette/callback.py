# A list of handlers fired with the same arguments, with jQuery-style
# policy flags.  Deferred builds its three channels out of these.
class Callback(object):
    def __init__(self, once=False, memory=False):
        self.once = once
        self.memory = memory
        self._handlers = []
        self._fired = False
        self._locked = False
        self._disabled = False
        self.last_args = None

    def __repr__(self):
        flags = [name for name in ('once', 'memory', 'fired', 'locked', 'disabled')
                 if getattr(self, name)]
        return "<%s.%s object at 0x%x; %d handlers; %s>" % (
            self.__class__.__module__, self.__class__.__name__, id(self),
            len(self._handlers), ', '.join(flags) or 'idle')

    def __len__(self):
        return len(self._handlers)

    @property
    def fired(self):
        return self._fired

    @property
    def locked(self):
        return self._locked

    @property
    def disabled(self):
        return self._disabled

    def has(self, handler):
        return handler in self._handlers

    def add(self, handler):
        if self._disabled:
            return self
        if isinstance(handler, (list, tuple)):
            for h in handler:
                self.add(h)
            return self
        if not callable(handler):
            raise TypeError("'%s' object is not callable" % type(handler).__name__)
        self._handlers.append(handler)
        if self._fired and self.memory:
            handler(*self.last_args)
        return self

    def fire(self, *args):
        if self._disabled or self._locked or (self._fired and self.once):
            return self
        # memory is recorded first so that handlers added by a running
        # handler are replayed from add() rather than skipped
        if self.memory:
            self.last_args = args
        self._fired = True
        for handler in list(self._handlers):
            if self._disabled:
                break
            handler(*args)
        return self

    __call__ = fire

    def lock(self):
        self._locked = True
        return self

    def disable(self):
        self._disabled = True
        self._handlers = []
        return self


def defer(*args):
    cb = Callback(once=True, memory=True)
    cb(*args)
    return cb
