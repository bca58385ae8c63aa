"""Interactive CLI application."""
import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from theory_tutor.bank import all_tags, question_label
from theory_tutor.context import StudyContext, load_context, set_reminders_enabled
from theory_tutor.db import DEFAULT_DB_PATH
from theory_tutor.importer import BankImportError, parse_bank_text, read_bank_file, write_bank_file
from theory_tutor.models import (
    EXAM, EXAM_RESULT, MAX_DAILY_GOAL, MAX_TEST_LENGTH, MIN_DAILY_GOAL, MIN_TEST_LENGTH,
    THEMES, Question, clamp,
)
from theory_tutor.notify import default_notifier
from theory_tutor.reminders import DAY_NAMES, REMINDER_TITLE, ReminderScheduler, parse_reminder_time
from theory_tutor.review import get_weak_questions, get_weak_tags
from theory_tutor.session import QuizSession
from theory_tutor.stats import aggregate, goal_pct, today_count

LOG_LEVEL = logging.WARNING
EXIT_WORDS = ("q", "menu")

console = Console()
logger = logging.getLogger(__name__)


class SessionExitRequested(Exception):
    """User asked to leave the current session and return to the menu."""


def session_prompt(prompt: str, choices: list[str] = None, default: str = "") -> str:
    """Prompt that raises SessionExitRequested on 'q' or 'menu'."""
    while True:
        answer = Prompt.ask(prompt, default=default).strip()
        if answer.lower() in EXIT_WORDS:
            raise SessionExitRequested()
        if choices is None:
            return answer
        if answer.lower() in choices:
            return answer.lower()
        console.print(f"[red]Please choose one of: {', '.join(choices)}[/red]")


def session_int_prompt(prompt: str, choices: list[str] = None, default: str = "") -> int:
    while True:
        answer = session_prompt(prompt, choices=choices, default=default)
        try:
            return int(answer)
        except ValueError:
            console.print("[red]Please enter a number.[/red]")


def show_welcome():
    console.print(Panel(
        "[bold]Theory Mock Test[/bold]\n[dim]Self-assess, track accuracy, and use reminders.[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("practice", "Random questions, graded one at a time"),
        ("exam", "Fixed-length mock exam"),
        ("stats", "Accuracy by tag"),
        ("weak", "Weakest tags and questions"),
        ("tags", "Filter questions by tag"),
        ("settings", "Daily goal, test length, reminder time"),
        ("remind", "Turn reminders on/off, test a notification"),
        ("bank", "Import or export the question bank"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<10}[/cyan] {desc}")


def show_header(context: StudyContext):
    stats = aggregate(context.history)
    today = today_count(context.history)
    goal = context.settings.daily_goal
    console.print(
        f"  Accuracy: [bold]{stats.accuracy}%[/bold]  |  "
        f"Attempts: [bold]{stats.total}[/bold]  |  "
        f"Today: [bold]{today}/{goal}[/bold] ({goal_pct(today, goal)}%)"
    )


def render_question(question: Question, show_answer: bool, title: str = "Question"):
    body = question.prompt or "[dim](no prompt)[/dim]"
    if question.tags:
        body += "\n\n" + " ".join(f"[magenta]#{t}[/magenta]" for t in question.tags)
    console.print(Panel(body, title=title, border_style="cyan"))
    if show_answer:
        answer = question.model_answer
        if question.source_note:
            answer += f"\n[dim]Source: {question.source_note}[/dim]"
        console.print(Panel(answer, title="Model answer", border_style="green"))


def run_practice(session: QuizSession):
    """Practice loop. Leaves on 'q' via SessionExitRequested."""
    if session.current is None:
        session.new_question()
    while True:
        if session.current is None:
            console.print("[yellow]No questions match the current tag filter.[/yellow]")
            return
        render_question(session.current, session.show_answer)
        action = session_prompt(
            "(r)eveal, (c)orrect, (x) incorrect, (n)ew, (q)uit",
            choices=["r", "c", "x", "n"], default="r",
        )
        if action == "r":
            session.toggle_show_answer()
        elif action == "c":
            session.grade(True)
            console.print("[green]Recorded as correct.[/green]")
        elif action == "x":
            session.grade(False)
            console.print("[red]Recorded as incorrect.[/red]")
        else:
            session.new_question()


def run_exam(session: QuizSession):
    session.start_exam()
    while session.mode == EXAM:
        question = session.exam_question()
        total = len(session.exam_order)
        render_question(question, session.show_answer, title=f"Question {session.exam_index + 1}/{total}")
        action = session_prompt(
            "(r)eveal, (c)orrect, (x) incorrect, (q)uit",
            choices=["r", "c", "x"], default="r",
        )
        if action == "r":
            session.toggle_show_answer()
        else:
            session.answer(action == "c")
    if session.mode == EXAM_RESULT:
        show_exam_result(session)


def show_exam_result(session: QuizSession):
    result = session.exam_result()
    score = result["score"]
    if score.total == 0:
        console.print("[yellow]No questions match the current tag filter, so the exam was empty.[/yellow]")
    else:
        console.print(Panel(
            f"[bold]{score.correct}/{score.total}[/bold] ({score.pct}%)",
            title="Exam result", border_style="blue",
        ))
    if result["missed"]:
        table = Table(title="Missed questions")
        table.add_column("Question", style="cyan")
        table.add_column("Model answer")
        for q in result["missed"]:
            table.add_row(q.prompt, q.model_answer)
        console.print(table)
    session.back_to_practice()


def cmd_practice(session: QuizSession):
    console.print("\n[bold]Practice[/bold] [dim](type q to return to the menu)[/dim]")
    try:
        run_practice(session)
    except SessionExitRequested:
        console.print("[dim]Back to menu.[/dim]")


def cmd_exam(session: QuizSession):
    console.print("\n[bold]Mock Exam[/bold] [dim](type q to abandon)[/dim]")
    try:
        run_exam(session)
    except SessionExitRequested:
        # Answers already given stay in the history log
        session.back_to_practice()
        console.print("[dim]Exam abandoned.[/dim]")


def cmd_stats(context: StudyContext):
    show_header(context)
    stats = aggregate(context.history)
    if not stats.by_tag:
        console.print("[yellow]No attempts recorded yet.[/yellow]")
        return
    table = Table(title="Accuracy by Tag")
    table.add_column("Tag", style="cyan")
    table.add_column("Attempts", justify="right")
    table.add_column("Correct", justify="right")
    table.add_column("Incorrect", justify="right")
    for tag in sorted(stats.by_tag):
        t = stats.by_tag[tag]
        table.add_row(tag, str(t.attempts), str(t.correct), str(t.incorrect))
    console.print(table)


def cmd_weak(context: StudyContext):
    console.print("\n[bold]Weak Areas[/bold]\n")
    stats = aggregate(context.history)
    weak_tags = get_weak_tags(stats)
    weak_questions = get_weak_questions(stats)
    if not weak_tags and not weak_questions:
        console.print("[green]Not enough attempts yet to find weak areas. Keep practicing.[/green]")
        return
    if weak_tags:
        table = Table(title="Weakest Tags")
        table.add_column("Tag", style="cyan")
        table.add_column("Accuracy", justify="right")
        table.add_column("Attempts", justify="right")
        for row in weak_tags:
            table.add_row(row["key"], f"{row['accuracy']}%", str(row["attempts"]))
        console.print(table)
    if weak_questions:
        table = Table(title="Weakest Questions")
        table.add_column("Question", style="cyan")
        table.add_column("Accuracy", justify="right")
        table.add_column("Attempts", justify="right")
        for row in weak_questions:
            table.add_row(question_label(context.bank, row["key"]), f"{row['accuracy']}%", str(row["attempts"]))
        console.print(table)


def cmd_tags(session: QuizSession):
    tags = all_tags(session.context.bank)
    if not tags:
        console.print("[yellow]The question bank has no tags.[/yellow]")
        return
    while True:
        active = session.filter.tags
        console.print("\n" + "  ".join(
            f"[reverse]{t}[/reverse]" if t in active else t for t in tags
        ))
        console.print(f"[dim]{len(session.pool())} questions selected. No tags selected = all questions.[/dim]")
        try:
            choice = session_prompt("Tag to toggle ('clear' to reset, Enter when done)")
        except SessionExitRequested:
            return
        if not choice:
            return
        if choice == "clear":
            session.set_filter([])
        elif choice in tags:
            session.toggle_tag(choice)
        else:
            console.print(f"[red]Unknown tag: {choice}[/red]")


def cmd_settings(context: StudyContext):
    s = context.settings
    console.print(
        f"\n  Reminder time: [bold]{s.reminder_time}[/bold]  |  "
        f"Days: [bold]{', '.join(DAY_NAMES[d] for d in s.reminder_days) or 'none'}[/bold]  |  "
        f"Daily goal: [bold]{s.daily_goal}[/bold]  |  Test length: [bold]{s.test_length}[/bold]  |  "
        f"Theme: [bold]{s.theme}[/bold]"
    )
    console.print(f"  Message: [dim]{s.reminder_message}[/dim]\n")
    try:
        time = session_prompt("Reminder time (HH:MM)", default=s.reminder_time)
        parse_reminder_time(time)
        days_text = session_prompt(
            "Reminder days (0=Sun..6=Sat, comma separated)",
            default=",".join(str(d) for d in s.reminder_days),
        )
        days = sorted({int(d) for d in days_text.split(",") if d.strip()})
        if any(d < 0 or d > 6 for d in days):
            raise ValueError("Days must be between 0 and 6")
        goal = session_int_prompt("Daily goal", default=str(s.daily_goal))
        length = session_int_prompt("Test length", default=str(s.test_length))
        message = session_prompt("Reminder message", default=s.reminder_message)
        theme = session_prompt("Theme", choices=THEMES, default=s.theme)
    except SessionExitRequested:
        console.print("[dim]Settings unchanged.[/dim]")
        return
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        return
    context.update_settings(
        reminder_time=time,
        reminder_days=days,
        daily_goal=clamp(goal, MIN_DAILY_GOAL, MAX_DAILY_GOAL),
        test_length=clamp(length, MIN_TEST_LENGTH, MAX_TEST_LENGTH),
        reminder_message=message,
        theme=theme,
    )
    console.print("[green]Settings saved.[/green]")


def cmd_remind(context: StudyContext, notifier, scheduler: ReminderScheduler):
    enabled = context.settings.reminder_enabled
    console.print(f"\nReminders are [bold]{'on' if enabled else 'off'}[/bold].")
    remaining = scheduler.remaining_ms()
    if enabled and remaining is not None:
        console.print(f"[dim]Next reminder in {remaining // 60000} minutes.[/dim]")
    if enabled and not context.settings.reminder_days:
        console.print("[yellow]No reminder days selected; reminding every 24 hours.[/yellow]")
    try:
        action = session_prompt("(e)nable, (d)isable, (t)est", choices=["e", "d", "t"])
    except SessionExitRequested:
        return
    if action == "t":
        if notifier.request_permission():
            notifier.fire(REMINDER_TITLE, context.settings.reminder_message)
        else:
            console.print("[red]Notifications are not available.[/red]")
        return
    result = set_reminders_enabled(context, notifier, action == "e")
    if action == "e" and not result:
        console.print("[red]Notification permission denied; reminders stay off.[/red]")
    else:
        console.print(f"[green]Reminders {'enabled' if result else 'disabled'}.[/green]")


def cmd_bank(context: StudyContext):
    console.print(f"\n[bold]Question Bank[/bold]: {len(context.bank)} entries")
    try:
        action = session_prompt("(i)mport file, (p)aste JSON, (e)xport file", choices=["i", "p", "e"])
        if action == "e":
            path = session_prompt("Export to", default="question-bank.json")
            write_bank_file(context.bank, path)
            console.print(f"[green]Exported {len(context.bank)} entries to {path}[/green]")
            return
        if action == "i":
            path = session_prompt("File path")
            if not Path(path).exists():
                console.print(f"[red]File not found: {path}[/red]")
                return
            bank = read_bank_file(path)
        else:
            bank = parse_bank_text(session_prompt("Paste the bank as a single-line JSON array"))
    except SessionExitRequested:
        return
    except BankImportError as e:
        console.print(f"[red]{e}[/red] [dim]Bank unchanged.[/dim]")
        return
    context.replace_bank(bank)
    console.print(f"[green]Bank replaced: {len(bank)} entries.[/green]")


def main(db_path: str = DEFAULT_DB_PATH):
    logging.basicConfig(
        level=LOG_LEVEL, format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    context = load_context(db_path)
    notifier = default_notifier(console)
    scheduler = ReminderScheduler(notifier)
    context.add_settings_listener(scheduler.on_settings_changed)
    scheduler.on_settings_changed(context.settings)
    session = QuizSession(context)

    show_welcome()
    show_header(context)

    try:
        while True:
            show_menu()
            choice = Prompt.ask("\n[bold]>[/bold]", default="practice").strip().lower()
            try:
                if choice == "practice":
                    cmd_practice(session)
                elif choice == "exam":
                    cmd_exam(session)
                elif choice == "stats":
                    cmd_stats(context)
                elif choice == "weak":
                    cmd_weak(context)
                elif choice == "tags":
                    cmd_tags(session)
                elif choice == "settings":
                    cmd_settings(context)
                elif choice == "remind":
                    cmd_remind(context, notifier, scheduler)
                elif choice == "bank":
                    cmd_bank(context)
                elif choice in ("quit", "exit", "q"):
                    console.print("[dim]Keep training![/dim]")
                    break
                else:
                    console.print("[red]Unknown command. Try again.[/red]")
            except KeyboardInterrupt:
                console.print("\n[dim]Use 'quit' to exit.[/dim]")
            except Exception as e:
                logger.debug("Command %s failed", choice, exc_info=True)
                console.print(f"[red]Error: {e}[/red]")
    finally:
        scheduler.cancel()


if __name__ == "__main__":
    main()
