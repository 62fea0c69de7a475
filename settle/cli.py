import asyncio
import functools
import json
from typing import Any, Callable, Collection, Optional

import click

from settle._cogs.clients import api, fetching
from settle._cogs.configs import configuration, profiles
from settle._cogs.helpers import versions
from settle._cogs.structs import states
from settle._core.actions import loggers, probing, waiting


class LogFormatParamType(click.Choice):

    def __init__(self) -> None:
        super().__init__(choices=[v.name.lower() for v in loggers.LogFormat])

    def convert(self, value: Any, param: Any, ctx: Any) -> loggers.LogFormat:
        if isinstance(value, loggers.LogFormat):
            return value
        name: str = super().convert(value, param, ctx)
        return loggers.LogFormat[name.upper()]


def logging_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to configure logging in all commands the same way."""
    @click.option('-v', '--verbose', is_flag=True)
    @click.option('-d', '--debug', is_flag=True)
    @click.option('-q', '--quiet', is_flag=True)
    @click.option('--log-format', type=LogFormatParamType(), default='full')
    @click.option('--log-refkey', type=str)
    @click.option('--log-prefix/--no-log-prefix', default=None)
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(verbose: bool, quiet: bool, debug: bool,
                log_format: loggers.LogFormat = loggers.LogFormat.FULL,
                log_prefix: Optional[bool] = False,
                log_refkey: Optional[str] = None,
                *args: Any, **kwargs: Any) -> Any:
        loggers.configure(debug=debug, verbose=verbose, quiet=quiet,
                          log_format=log_format, log_refkey=log_refkey, log_prefix=log_prefix)
        return fn(*args, **kwargs)

    return wrapper


def _load_profile(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> None:
    """ Inject the profile's values as defaults of the other options of the command. """
    if value is not None:
        path, _, section = value.partition('#')
        try:
            defaults = profiles.load_profile(path, section=section or None)
        except (OSError, profiles.ProfileError) as e:
            raise click.BadParameter(str(e), ctx=ctx, param=param)
        ctx.default_map = dict(defaults, **(ctx.default_map or {}))


@click.version_option(prog_name='settle', version=versions.version or 'unknown')
@click.group(name='settle', context_settings=dict(
    auto_envvar_prefix='SETTLE',
))
def main() -> None:
    pass


@main.command()
@click.option('--profile', type=str, metavar='FILE[#SECTION]', is_eager=True,
              expose_value=False, callback=_load_profile)
@logging_options
@click.option('-s', '--server', type=str, required=True)
@click.option('--path', type=str, required=True)
@click.option('--items-key', type=str, required=True)
@click.option('--id-key', type=str, required=True)
@click.option('--ids-param', type=str)
@click.option('--token-key', type=str, default='NextToken')
@click.option('--token-param', type=str)
@click.option('--state-key', type=str, required=True)
@click.option('-p', '--pending', type=str, multiple=True)
@click.option('-t', '--target', type=str, multiple=True)
@click.option('--absence-is-success/--absence-is-failure', default=None)
@click.option('--not-found-checks', type=int, default=0)
@click.option('--timeout', type=float)
@click.option('--delay', type=float)
@click.option('--backoff', type=float)
@click.option('--max-delay', type=float)
@click.option('--jitter', type=float)
@click.option('--strict', is_flag=True)
@click.argument('id')
def wait(
        id: str,
        server: str,
        path: str,
        items_key: str,
        id_key: str,
        ids_param: Optional[str],
        token_key: str,
        token_param: Optional[str],
        state_key: str,
        pending: Collection[str],
        target: Collection[str],
        absence_is_success: Optional[bool],
        not_found_checks: int,
        timeout: Optional[float],
        delay: Optional[float],
        backoff: Optional[float],
        max_delay: Optional[float],
        jitter: Optional[float],
        strict: bool,
) -> None:
    """ Wait until a resource settles in one of the target states, or disappears. """
    settings = configuration.Settings()
    try:
        spec = states.WaitSpec(
            pending=set(pending),
            target=set(target),
            absence_is_success=absence_is_success,
            not_found_checks=not_found_checks,
            timeout=timeout if timeout is not None else settings.waiting.timeout,
            delay=delay if delay is not None else settings.waiting.delay,
            backoff=backoff if backoff is not None else settings.waiting.backoff,
            max_delay=max_delay if max_delay is not None else settings.waiting.max_delay,
            jitter=jitter if jitter is not None else settings.waiting.jitter,
            what=f"{path.strip('/') or 'resource'} {id}",
        )
    except ValueError as e:
        raise click.UsageError(str(e))

    coro = _wait(
        id,
        spec=spec,
        server=server,
        path=path,
        items_key=items_key,
        id_key=id_key,
        ids_param=ids_param,
        token_key=token_key,
        token_param=token_param,
        state_key=state_key,
        strict=strict,
        settings=settings,
    )
    try:
        snapshot = asyncio.run(coro)
    except waiting.WaitError as e:
        raise click.ClickException(f"{type(e).__name__}: {e}")
    click.echo(json.dumps(snapshot, indent=2, sort_keys=True))


async def _wait(
        id: str,
        *,
        spec: states.WaitSpec,
        server: str,
        path: str,
        items_key: str,
        id_key: str,
        ids_param: Optional[str],
        token_key: str,
        token_param: Optional[str],
        state_key: str,
        strict: bool,
        settings: configuration.Settings,
) -> Optional[fetching.RawRecord]:
    logger = loggers.ResourceLogger(kind=path.strip('/'), id=id)
    async with api.APIContext(server) as context:
        lister = fetching.http_lister(
            path,
            items_key=items_key,
            ids=[id],
            ids_param=ids_param,
            token_key=token_key,
            token_param=token_param,
            context=context,
            settings=settings,
            logger=logger,
        )
        finder = functools.partial(fetching.find_by_id, id, lister=lister,
                                   get_id=fetching.field_getter(id_key), strict=strict)
        probe = probing.status_probe(finder, lambda record: probing.dig(record, state_key))
        return await waiting.wait_for_state(probe, spec, logger=logger)
