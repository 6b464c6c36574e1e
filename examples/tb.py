import lorgnette
from lorgnette import _o, launch, Deferred

gate = Deferred()

def die():
  raise Exception("boom")

@_o
def fifth():
  die()

def fourth():
  return fifth()

@_o
def third():
  yield gate
  yield fourth()

def second():
  return third()

@_o
def first():
  yield second()

launch(first)
gate.resolve()
