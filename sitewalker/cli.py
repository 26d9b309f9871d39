# === FILE: sitewalker/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска SiteWalker через командную строку.

Команды:
  sitemap URL      Построить карту сайта (вывести или сохранить в sitemap.xml)
  test URL         Проверить ссылки, изображения, стили и скрипты на битые адреса
  screenshot URL   Сохранить скриншот каждой внутренней страницы
  help [COMMAND]   Показать справку по команде

Общие опции:
  --debug             Подробные логи (без анимации)
  --delay MS          Пауза перед каждым HTTP-запросом, мс
  --config PATH       YAML/JSON со значениями по умолчанию
  --log-file PATH     Дублировать логи в файл

Дополнительно:
  --version, -v       Показать версию SiteWalker

Пример:
  sitewalker --delay 200 sitemap --xml --dir out https://example.com
"""
import asyncio
import sys
from pathlib import Path
from typing import Any, NoReturn

import click
from pydantic import ValidationError

from sitewalker import __version__
from sitewalker.config import CrawlOptions, OutputFormat, TestTarget, build_options, load_config
from sitewalker.engine import build_sitemap, check_links, take_screenshots
from sitewalker.errors import SiteWalkerError
from sitewalker.logger import init_logging, logger
from sitewalker.progress import success
from sitewalker.report.json_report import write_test_report
from sitewalker.utils import ensure_directory, is_valid_url, trim_root_url

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str) -> NoReturn:
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _root_url(url: str) -> str:
    root = trim_root_url(url)
    if not is_valid_url(root):
        logger.error("missing or invalid URL", extra={"url": url})
        print_error(f'Некорректный URL: {url!r}')
    return root


def _options(ctx: click.Context, **overrides: Any) -> CrawlOptions:
    obj = ctx.obj
    try:
        return build_options(
            obj['defaults'],
            debug=True if obj['debug'] else None,
            delay_ms=obj['delay'],
            **overrides,
        )
    except ValidationError as e:
        print_error(f'Некорректные параметры: {e}')


def _run(coro) -> Any:
    try:
        return asyncio.run(coro)
    except SiteWalkerError as e:
        print_error(f'Ошибка при обходе: {e}')


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteWalker, version %(version)s')
@click.option('--debug', is_flag=True, help='Подробные логи, без анимации.')
@click.option(
    '--delay', 'delay',
    type=click.IntRange(min=0),
    default=None,
    help='Пауза перед каждым HTTP-запросом, мс.'
)
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Файл YAML/JSON со значениями по умолчанию.'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (только stdout, если не указан)'
)
@click.pass_context
def cli(ctx, debug, delay, config_path, log_file):
    """SiteWalker: карта сайта, проверка ссылок и скриншоты страниц."""
    init_logging(debug=debug, log_file=log_file)
    try:
        defaults = load_config(config_path) if config_path else {}
    except (OSError, ValueError, TypeError) as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj.update(defaults=defaults, debug=debug, delay=delay)


@cli.command('sitemap', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option('--print', 'print_', is_flag=True, help='Вывести карту сайта в консоль.')
@click.option('--xml', 'xml', is_flag=True, help='Сохранить карту сайта в sitemap.xml.')
@click.option(
    '--dir', 'directory',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help='Каталог для sitemap.xml.'
)
@click.pass_context
def sitemap_command(ctx, url, print_, xml, directory):
    """Построить карту сайта с корнем URL."""
    if not print_ and not xml:
        click.echo(ctx.get_help())
        return
    if xml and directory is None:
        raise click.UsageError('--xml requires --dir <path>', ctx=ctx)

    root = _root_url(url)
    options = _options(
        ctx, output=OutputFormat.XML if xml else OutputFormat.CONSOLE, directory=directory
    )
    sitemap = _run(build_sitemap(root, options))
    if not options.debug:
        success('sitemap was created!')

    if print_:
        sitemap.print()
    if xml:
        try:
            saved = sitemap.to_xml(options.directory)
        except SiteWalkerError as e:
            print_error(f'Ошибка при сохранении XML: {e}')
        click.echo(f'sitemap was saved to {saved}')


@cli.command('test', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option(
    '--links/--images', 'links',
    default=True,
    show_default=True,
    help='Проверять ссылки (по умолчанию) или изображения.'
)
@click.option('--json', 'as_json', is_flag=True, help='Сохранить результаты в JSON-файл.')
@click.option(
    '--dir', 'directory',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help='Каталог для JSON-файла.'
)
@click.option('--internal-only', is_flag=True, help='Не запрашивать внешние ссылки.')
@click.pass_context
def test_command(ctx, url, links, as_json, directory, internal_only):
    """Проверить ссылки в тегах a, link, img и script на ответы 4xx/5xx."""
    if as_json and directory is None:
        raise click.UsageError('--json requires --dir <path>', ctx=ctx)

    root = _root_url(url)
    options = _options(
        ctx,
        output=OutputFormat.JSON if as_json else OutputFormat.CONSOLE,
        directory=directory,
        test_target=TestTarget.LINKS if links else TestTarget.IMAGES,
        descend_external=False if internal_only else None,
    )
    if options.test_target is not TestTarget.LINKS:
        print_error('Проверка изображений пока не поддерживается')
    if as_json:
        try:
            ensure_directory(options.directory)
        except SiteWalkerError as e:
            print_error(f'Ошибка при создании каталога: {e}')

    records = _run(check_links(root, options, collect_records=as_json))

    if as_json:
        try:
            saved = write_test_report(root, records, options.directory)
        except SiteWalkerError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')
        click.echo(f'JSON report: {saved}')


@cli.command('screenshot', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option(
    '--dir', 'directory',
    required=True,
    type=click.Path(file_okay=False, path_type=Path),
    help='Каталог для скриншотов.'
)
@click.pass_context
def screenshot_command(ctx, url, directory):
    """Сохранить скриншот каждой внутренней страницы сайта."""
    root = _root_url(url)
    options = _options(ctx, directory=directory)
    saved = _run(take_screenshots(root, options))
    if not options.debug:
        success('screenshots were taken!')
    click.echo(f'{len(saved)} screenshots were saved to {options.directory}')


@cli.command('help', context_settings=CONTEXT_SETTINGS)
@click.argument('command', required=False)
@click.pass_context
def help_command(ctx, command):
    """Показать справку по команде COMMAND."""
    group_ctx = ctx.parent
    if not command:
        click.echo(group_ctx.get_help())
        return
    target = cli.get_command(group_ctx, command)
    if target is None:
        print_error(f'Неизвестная команда: {command}')
    with click.Context(target, info_name=command, parent=group_ctx) as sub_ctx:
        click.echo(target.get_help(sub_ctx))


if __name__ == "__main__":
    cli()
