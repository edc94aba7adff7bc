from loguru import logger
from rich.pretty import pprint

from dialect import *

GRAMMAR = """
prompt: "> "
exitCmd: exit
helpCmd: help
initFunc: greet
exitFunc: farewell
commands:
  - label: show
    arguments:
      - label: ""
        help: show every task
        execFunc: showTasks
        options:
          - label: readOnly
            short: -r
            long: --read-only
            help: only read tasks
      - label: daily-tasks
        help: show the tasks of the day
        execFunc: showDailyTasks
        options:
          - label: readOnly
            short: -r
            help: only read tasks
            variable:
              label: var4
              required: true
              default: das
"""

registry = Registry()


@registry.register
def greet(flags):
    return b"type 'help' to list the commands, 'exit' to leave\n"


@registry.register
def farewell(flags):
    return b"bye\n"


@registry.register(name="showTasks")
def show_tasks(flags):
    return b"all tasks (%s)\n" % (b"read-only" if flags.isset("readOnly") else b"read-write")


@registry.register(name="showDailyTasks")
def show_daily_tasks(flags):
    value, _ = flags.getvar("readOnly")
    return b"daily tasks for %s\n" % value.encode()


if __name__ == '__main__':
    logger.enable("dialect")
    try:
        app = App(loads(GRAMMAR), registry)
    except DialectError as fault:
        trigger(fault, shell=True, fancy=True)
    else:
        pprint(app.grammar)
        app.run()
