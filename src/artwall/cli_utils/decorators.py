"""
artwall Decorators

Use these decorators to turn plain functions into artwall subcommands. The CLI is built on a
callback architecture: every subcommand returns a callback immediately upon invocation, and the
group's result callback runs them in command line order once all subcommands have been parsed.
Each callback receives the ArtwallPipeline object and returns it.

    @click.command(name="sparkle")
    @callback
    @catch_errors
    def cli(pipeline, amount):
        '''Make the wallpaper sparkle'''

        ...
        return pipeline
"""

from functools import partial
from functools import wraps

from artwall.cli_utils.console import fail


def callback(func):
    """
    Receive a function and convert it into a new function that returns the original function as a
    callback.

    Invoking the decorated name merely binds the arguments click parsed from the command line and
    returns the callback, which the pipeline processor later calls with the pipeline object as
    its first argument.
    """

    @wraps(func)
    def _callback(*args, **kwargs):
        bound = partial(func, *args, **kwargs)

        @wraps(func)
        def wrapper(pipeline):
            return bound(pipeline)

        return wrapper

    return _callback


def catch_errors(func):
    """
    Catch and format errors with the "fail" console template and gracefully
    exit the application with an error code.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)

        except Exception as error:
            fail(str(error))
            raise SystemExit(1)

    return wrapper
