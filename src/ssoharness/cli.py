# Standard library imports
import sys
from typing import List, Optional

# Third-party imports
import typer

# Local imports
from common.logger import log_error, log_info
from ssoharness.utils.container_manager import (
    STACKS,
    Backend,
    TestContext,
    app_url,
    db_config,
    load_config,
    reset_db,
    stack_down,
    stack_up,
    start_app,
    start_db,
    stop_app,
    stop_db,
    wait_for,
)

app = typer.Typer(help="SSO 통합테스트 환경 구동/정리")


@app.callback()
def main_options(
    ctx: typer.Context,
    env_file: str = typer.Option("test.env", "--env-file", help="설정파일 경로 (key=value)"),
):
    ctx.obj = {"env_file": env_file, "config": load_config(env_file)}


@app.command("start-db")
def start_db_cmd(ctx: typer.Context, backend: Backend = typer.Argument(..., help="sqlite | postgres | mariadb | mysql")):
    """DB 컨테이너 시작 (sqlite는 저장소 파일 삭제)"""
    start_db(backend, ctx.obj["config"])


@app.command("stop-db")
def stop_db_cmd(ctx: typer.Context, backend: Backend = typer.Argument(..., help="sqlite | postgres | mariadb | mysql")):
    """DB 컨테이너 중지 (이미 중지된 경우 무시)"""
    stop_db(backend, ctx.obj["config"])


@app.command("reset-db")
def reset_db_cmd(ctx: typer.Context, backend: Backend = typer.Argument(..., help="sqlite | postgres | mariadb | mysql")):
    """DB 중지 후 재시작 → 빈 DB"""
    reset_db(backend, ctx.obj["config"])


@app.command()
def db_url(ctx: typer.Context, backend: Backend = typer.Argument(..., help="sqlite | postgres | mariadb | mysql")):
    """애플리케이션에 주입될 DB 접속 설정 출력 (KEY=VALUE)"""
    for key, value in db_config(backend, ctx.obj["config"]).items():
        typer.echo(f"{key}={value}")


@app.command()
def wait(
    ctx: typer.Context,
    path: str = typer.Option("/", "--path", help="DOMAIN 기준 점검 경로"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="최대 대기 시간(초)"),
):
    """애플리케이션이 200을 응답할 때까지 대기"""
    attempts = wait_for(app_url(ctx.obj["config"], path), timeout=timeout)
    typer.echo(f"ready after {attempts} attempt(s)")


@app.command()
def run(
    ctx: typer.Context,
    backend: Backend = typer.Option(Backend.SQLITE, "--backend", help="사용할 DB 백엔드"),
    reset: bool = typer.Option(True, "--reset/--no-reset", help="시작 전/종료 후 DB 초기화 여부"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="readiness 최대 대기 시간(초)"),
):
    """
    DB + 애플리케이션 기동 후 Ctrl-C 까지 유지

    절차:
      1) (reset) DB 초기화
      2) 애플리케이션 실행 및 200 응답 대기
      3) Ctrl-C 또는 프로세스 종료 시 stop_app (reset이면 DB 정리)
    """
    config = ctx.obj["config"]
    context = TestContext(name=f"cli-{backend.value}", backend=backend)

    handle = start_app(config, context, reset=reset, timeout=timeout)
    try:
        handle.process.wait()
        log_error(f"[run] 애플리케이션이 종료됨 (종료코드={handle.process.returncode})")
    except KeyboardInterrupt:
        log_info("[run] Ctrl-C 수신 → 종료 진행")
    finally:
        stop_app(handle, context, reset=reset)


@app.command("stack-up")
def stack_up_cmd(
    ctx: typer.Context,
    stack: str = typer.Argument(..., help=f"IdP 스택 ({', '.join(STACKS)})"),
    profile: List[str] = typer.Option([], "--profile", help="compose profile (예: VaultWarden)"),
):
    """IdP 스택 docker compose up -d"""
    stack_up(stack, ctx.obj["config"], env_file=ctx.obj["env_file"], profiles=profile)


@app.command("stack-down")
def stack_down_cmd(
    ctx: typer.Context,
    stack: str = typer.Argument(..., help=f"IdP 스택 ({', '.join(STACKS)})"),
    profile: List[str] = typer.Option([], "--profile", help="compose profile (예: VaultWarden)"),
):
    """IdP 스택 docker compose down"""
    stack_down(stack, ctx.obj["config"], env_file=ctx.obj["env_file"], profiles=profile)


def main():
    try:
        app()
    except Exception as e:
        log_error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
