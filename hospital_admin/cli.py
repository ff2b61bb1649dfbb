#!/usr/bin/env python3
"""Command-line dashboard for hospital queue administration.

Usage:
    hospital-admin <command> [args]

Every failure is printed as one message and the command exits non-zero.
Nothing is retried.
"""
import getpass
import sys
import time
from typing import Callable, Dict, List, Optional

import requests

from hospital_admin import config
from hospital_admin.auth import AuthSession, LoginError
from hospital_admin.dashboard import format_header_date, overview, summarize_queue, today_iso
from hospital_admin.endpoints import AdminApi
from hospital_admin.http_client import (
    ApiGateway,
    RequestFailedError,
    ResponseDecodeError,
    StaleSessionError,
)
from hospital_admin.logging_config import setup_structured_logging
from hospital_admin.session_store import SessionStore


# ANSI color codes
class Colors:
    BLUE = '\033[94m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    RESET = '\033[0m'
    BOLD = '\033[1m'


USAGE = """Usage: hospital-admin <command> [args]

Commands:
  login <email> [password]           Sign in (admins only)
  logout                             Discard the stored session
  whoami                             Show the signed-in user
  overview [department_id]           Headline numbers for a department
  departments                        List departments
  create-department <name>           Create a department
  queue <department_id> [date]       Show a department's queue
  watch <department_id> [date]       Refresh the queue every few seconds
  next <department_id> [date]        Call the next patient
  move <queue_id> <UP|DOWN>          Move a queue entry
  complete <appointment_id>          Mark an appointment done
  cancel <appointment_id>            Cancel an appointment
"""

# Failures surfaced to the user; everything else is a bug and propagates
HANDLED_ERRORS = (
    LoginError,
    RequestFailedError,
    ResponseDecodeError,
    StaleSessionError,
    ValueError,
    requests.exceptions.RequestException,
)


class UsageError(Exception):
    pass


def print_colored(text: str, color: str = Colors.RESET):
    """Print colored text."""
    print(f"{color}{text}{Colors.RESET}")


def build_client(database_url: Optional[str] = None, base_url: Optional[str] = None):
    """Wire session store, gateway, endpoints and auth together."""
    store = SessionStore(database_url)
    gateway = ApiGateway(base_url=base_url, session_store=store)
    api = AdminApi(gateway)
    return api, AuthSession(api, store)


def _arg(args: List[str], index: int, name: str) -> str:
    if len(args) <= index or not args[index].strip():
        raise UsageError(f"Missing argument: {name}")
    return args[index]


def _print_queue(summary):
    active = f"#{summary.active_item.position}" if summary.active_item else "-"
    print_colored(
        f"Total: {summary.total} | Waiting: {summary.waiting_count} | Active: {active}",
        Colors.BOLD,
    )
    if not summary.items:
        print("Queue is empty.")
    for item in summary.items:
        print(f"  #{item.position:<4} {item.status.value:<8} appointment={item.appointment_id}  id={item.id}")


def cmd_login(api: AdminApi, auth: AuthSession, args: List[str]) -> int:
    email = _arg(args, 0, "email")
    password = args[1] if len(args) > 1 else getpass.getpass("Password: ")
    user = auth.login(email, password)
    print_colored(f"✅ Login successful. Welcome, {user.name}.", Colors.GREEN)
    return 0


def cmd_logout(api: AdminApi, auth: AuthSession, args: List[str]) -> int:
    auth.logout()
    print("Logged out.")
    return 0


def cmd_whoami(api: AdminApi, auth: AuthSession, args: List[str]) -> int:
    user = auth.restore()
    if user is None and auth.last_error is not None:
        raise auth.last_error
    if user is None:
        print_colored("Not logged in.", Colors.YELLOW)
        return 1
    print(f"{user.name} <{user.email}> ({user.role})")
    return 0


def cmd_departments(api: AdminApi, auth: AuthSession, args: List[str]) -> int:
    departments = api.departments.list(hospital_id=config.HOSPITAL_ID or None)
    print_colored(f"{len(departments)} department(s)", Colors.BOLD)
    for department in departments:
        print(f"  {department.id}  {department.name}")
    return 0


def cmd_create_department(api: AdminApi, auth: AuthSession, args: List[str]) -> int:
    name = " ".join(args)
    department = api.departments.create(name, config.HOSPITAL_ID)
    print_colored(f"✅ Department created: {department.name} ({department.id})", Colors.GREEN)
    return 0


def cmd_queue(api: AdminApi, auth: AuthSession, args: List[str]) -> int:
    department_id = _arg(args, 0, "department_id")
    date = args[1] if len(args) > 1 else today_iso()
    _print_queue(summarize_queue(api.queue.list_admin(department_id, date)))
    return 0


def cmd_watch(api: AdminApi, auth: AuthSession, args: List[str]) -> int:
    department_id = _arg(args, 0, "department_id")
    date = args[1] if len(args) > 1 else today_iso()
    try:
        while True:
            print_colored(f"\n{format_header_date()} - department {department_id}", Colors.BLUE)
            _print_queue(summarize_queue(api.queue.list_admin(department_id, date)))
            time.sleep(config.QUEUE_REFRESH_SECONDS)
    except KeyboardInterrupt:
        print()
    return 0


def cmd_next(api: AdminApi, auth: AuthSession, args: List[str]) -> int:
    department_id = _arg(args, 0, "department_id")
    date = args[1] if len(args) > 1 else today_iso()
    item = api.queue.next(department_id, date)
    print_colored(
        f"✅ Now serving #{item.position} (appointment {item.appointment_id})", Colors.GREEN
    )
    return 0


def cmd_move(api: AdminApi, auth: AuthSession, args: List[str]) -> int:
    queue_id = _arg(args, 0, "queue_id")
    direction = _arg(args, 1, "direction")
    moved = api.queue.move(queue_id, direction)
    print(f"Moved {moved.id} to position #{moved.position}")
    return 0


def cmd_complete(api: AdminApi, auth: AuthSession, args: List[str]) -> int:
    result = api.appointments.complete(_arg(args, 0, "appointment_id"))
    print_colored(f"✅ {result.message}", Colors.GREEN)
    return 0


def cmd_cancel(api: AdminApi, auth: AuthSession, args: List[str]) -> int:
    result = api.appointments.cancel(_arg(args, 0, "appointment_id"))
    print_colored(f"✅ {result.message}", Colors.GREEN)
    return 0


def cmd_overview(api: AdminApi, auth: AuthSession, args: List[str]) -> int:
    departments = api.departments.list()
    department_id = args[0] if args else (departments[0].id if departments else "")
    queue = api.queue.list_admin(department_id) if department_id else []
    data = overview(departments, queue, preview_size=config.QUEUE_PREVIEW_SIZE)

    print_colored(format_header_date(), Colors.BLUE)
    print(f"Departments:          {data.departments_count}")
    print(f"Today's appointments: {data.todays_appointments_count}")
    print(f"Waiting:              {data.waiting_count}")
    print(f"Now serving:          {'#%d' % data.active_item.position if data.active_item else '-'}")
    for item in data.preview:
        print(f"  #{item.position:<4} {item.status.value}")
    if data.preview:
        print(f"Showing first {len(data.preview)} items.")
    return 0


# Commands that run without a signed-in admin
PUBLIC_COMMANDS: Dict[str, Callable] = {
    "login": cmd_login,
    "logout": cmd_logout,
    "whoami": cmd_whoami,
}

ADMIN_COMMANDS: Dict[str, Callable] = {
    "overview": cmd_overview,
    "departments": cmd_departments,
    "create-department": cmd_create_department,
    "queue": cmd_queue,
    "watch": cmd_watch,
    "next": cmd_next,
    "move": cmd_move,
    "complete": cmd_complete,
    "cancel": cmd_cancel,
}


def run(argv: List[str], api: AdminApi, auth: AuthSession) -> int:
    """
    Dispatch one command.

    Returns:
        Process exit code (0 success, 1 failure, 2 usage error)
    """
    if not argv or argv[0] in ("-h", "--help", "help"):
        print(USAGE)
        return 0 if argv else 2

    command, args = argv[0], argv[1:]
    handler = PUBLIC_COMMANDS.get(command) or ADMIN_COMMANDS.get(command)
    if handler is None:
        print_colored(f"Unknown command: {command}", Colors.RED)
        print(USAGE)
        return 2

    try:
        if command in ADMIN_COMMANDS:
            auth.restore()
            auth.require_access()
        return handler(api, auth, args)
    except UsageError as e:
        print_colored(str(e), Colors.RED)
        print(USAGE)
        return 2
    except HANDLED_ERRORS as e:
        print_colored(f"❌ {getattr(e, 'message', None) or e}", Colors.RED)
        return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the hospital-admin command."""
    setup_structured_logging(config.LOG_LEVEL)
    api, auth = build_client()
    return run(sys.argv[1:] if argv is None else argv, api, auth)


if __name__ == "__main__":
    sys.exit(main())
