import threading
import tkinter as tk
from tkinter import messagebox, ttk

from core.config import DEFAULT_QUESTION_COUNT, TICK_INTERVAL_SECONDS
from core.logging_setup import setup_console_logging
from models import (
    QuizState,
    ResultsState,
    SessionConfig,
    SetupState,
    StudyingState,
)
from question_source import make_question_source
from scoring import feedback_message, feedback_tier
from serialization import format_countdown
from session_controller import SessionController

FEEDBACK_COLORS = {
    "excellent": "#4caf50",
    "good": "#ff9800",
    "keep_studying": "#f44336",
}


def _parse_int(value: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return 0


class StudyApp(tk.Tk):
    def __init__(self, controller: SessionController | None = None):
        super().__init__()
        self.title("Study Timer")
        self.geometry("900x680")
        self.minsize(720, 560)
        self._apply_style()

        self.controller = controller or SessionController(make_question_source())
        self.tick_ms = max(1, int(TICK_INTERVAL_SECONDS * 1000))
        self._tick_job: str | None = None
        self._poll_job: str | None = None

        self.subject = tk.StringVar()
        self.content = tk.StringVar()
        self.question_count = tk.StringVar(value=str(DEFAULT_QUESTION_COUNT))
        self.study_minutes = tk.StringVar()
        self.choice_vars: dict[str, tk.StringVar] = {}

        self._build_ui()

    def _build_ui(self) -> None:
        self.container = ttk.Frame(self)
        self.container.pack(fill=tk.BOTH, expand=True)

        self.setup_frame = ttk.Frame(self.container, padding=10)
        self.studying_frame = ttk.Frame(self.container, padding=10)
        self.quiz_frame = ttk.Frame(self.container, padding=10)
        self.results_frame = ttk.Frame(self.container, padding=10)

        for frame in (
            self.setup_frame,
            self.studying_frame,
            self.quiz_frame,
            self.results_frame,
        ):
            frame.grid(row=0, column=0, sticky="nsew")
        self.container.rowconfigure(0, weight=1)
        self.container.columnconfigure(0, weight=1)

        self._build_setup_ui()
        self._build_studying_ui()
        self._build_quiz_ui()
        self._build_results_ui()
        self._show_frame(self.setup_frame)

    def _show_frame(self, frame: ttk.Frame) -> None:
        frame.tkraise()

    def _build_setup_ui(self) -> None:
        ttk.Label(
            self.setup_frame,
            text="Let's get started!",
            font=("Segoe UI", 16, "bold"),
        ).pack(anchor=tk.W, pady=5)

        form = ttk.LabelFrame(self.setup_frame, text="Study settings", padding=10)
        form.pack(fill=tk.X, pady=5)
        fields = [
            ("Subject", self.subject, "e.g. History, Mathematics"),
            ("Content", self.content, "Specific topic you are going to study"),
            ("Number of questions", self.question_count, "Between 1 and 50"),
            ("Study time (minutes)", self.study_minutes, "Between 1 and 120"),
        ]
        if not self.controller.requires_topic:
            fields = fields[3:]
        for row, (label, variable, hint) in enumerate(fields):
            ttk.Label(form, text=label).grid(row=row, column=0, sticky=tk.W, pady=4)
            entry = ttk.Entry(form, textvariable=variable, width=40)
            entry.grid(row=row, column=1, sticky=tk.W, padx=5)
            ttk.Label(form, text=hint, foreground="#757575").grid(
                row=row, column=2, sticky=tk.W
            )
            variable.trace_add("write", lambda *_: self._update_start_button())

        self.start_button = ttk.Button(
            self.setup_frame, text="Start studying", command=self._start_study
        )
        self.start_button.pack(anchor=tk.E, pady=10)
        self._update_start_button()

    def _build_studying_ui(self) -> None:
        ttk.Label(
            self.studying_frame,
            text="Time to study!",
            font=("Segoe UI", 16, "bold"),
        ).pack(anchor=tk.W, pady=5)
        self.topic_label = ttk.Label(self.studying_frame, text="")
        self.topic_label.pack(anchor=tk.W)
        self.countdown_label = ttk.Label(
            self.studying_frame,
            text=format_countdown(0),
            font=("Segoe UI", 48, "bold"),
            foreground="#ff6f00",
        )
        self.countdown_label.pack(pady=30)
        self.countdown_hint = ttk.Label(self.studying_frame, text="Time left")
        self.countdown_hint.pack()
        self.skip_button = ttk.Button(
            self.studying_frame,
            text="Skip timer and go to the questions",
            command=self._skip_countdown,
        )
        self.skip_button.pack(pady=10)

    def _build_quiz_ui(self) -> None:
        self.quiz_header = ttk.Label(
            self.quiz_frame, text="Questions", font=("Segoe UI", 16, "bold")
        )
        self.quiz_header.pack(anchor=tk.W, pady=5)

        self.question_canvas = tk.Canvas(
            self.quiz_frame, borderwidth=1, relief=tk.SOLID, highlightthickness=0
        )
        self.question_scroll = ttk.Scrollbar(
            self.quiz_frame,
            orient=tk.VERTICAL,
            command=self.question_canvas.yview,
            style="Thin.Vertical.TScrollbar",
        )
        self.question_scroll.pack(side=tk.RIGHT, fill=tk.Y)
        self.question_canvas.pack(fill=tk.BOTH, expand=True, pady=5)
        self.question_canvas.configure(yscrollcommand=self.question_scroll.set)
        self.question_container = ttk.Frame(self.question_canvas)
        self.question_canvas.create_window((0, 0), window=self.question_container, anchor="nw")
        self.question_container.bind(
            "<Configure>",
            lambda event: self.question_canvas.configure(
                scrollregion=self.question_canvas.bbox("all")
            ),
        )

        self.submit_button = ttk.Button(
            self.quiz_frame, text="Submit answers", command=self._submit
        )
        self.submit_button.pack(anchor=tk.E, pady=5)

    def _build_results_ui(self) -> None:
        ttk.Label(
            self.results_frame,
            text="Final result",
            font=("Segoe UI", 16, "bold"),
        ).pack(anchor=tk.W, pady=5)
        self.feedback_label = ttk.Label(self.results_frame, text="", font=("Segoe UI", 12))
        self.feedback_label.pack(anchor=tk.W, pady=5)
        self.correct_label = ttk.Label(
            self.results_frame, text="", font=("Segoe UI", 24, "bold"), foreground="#4caf50"
        )
        self.correct_label.pack(anchor=tk.W, pady=5)
        self.incorrect_label = ttk.Label(
            self.results_frame, text="", font=("Segoe UI", 24, "bold"), foreground="#f44336"
        )
        self.incorrect_label.pack(anchor=tk.W, pady=5)
        ttk.Button(
            self.results_frame, text="Start a new study", command=self._restart
        ).pack(anchor=tk.E, pady=10)

    def _apply_style(self) -> None:
        style = ttk.Style(self)
        style.theme_use("clam")
        style.configure("TFrame", background="#f5f5f5")
        style.configure("TLabel", background="#f5f5f5", font=("Segoe UI", 10))
        style.configure("TButton", padding=6, font=("Segoe UI", 10))
        style.configure("TLabelframe", background="#f5f5f5", font=("Segoe UI", 10, "bold"))
        style.configure("TLabelframe.Label", background="#f5f5f5")
        style.configure("TRadiobutton", background="#f5f5f5")
        style.configure("Thin.Vertical.TScrollbar", gripcount=0, width=8)

    def _form_config(self) -> SessionConfig:
        return SessionConfig(
            subject=self.subject.get().strip(),
            content=self.content.get().strip(),
            question_count=_parse_int(self.question_count.get()),
            study_minutes=_parse_int(self.study_minutes.get()),
        )

    def _update_start_button(self) -> None:
        valid = not self.controller.validate(self._form_config())
        self.start_button.state(["!disabled"] if valid else ["disabled"])

    def _start_study(self) -> None:
        config = self._form_config()
        errors = self.controller.validate(config)
        if errors:
            messagebox.showwarning("Error", "\n".join(errors))
            return
        if not self.controller.start_study(config):
            return
        if config.subject:
            self.topic_label.config(text=f"{config.subject} - {config.content}")
        else:
            self.topic_label.config(text="")
        self._render()
        self._schedule_tick()

    def _schedule_tick(self) -> None:
        self._cancel_tick()
        session_id = self.controller.state.session_id

        def _tick() -> None:
            self._tick_job = None
            ticket = self.controller.tick(session_id)
            if ticket:
                self._start_acquisition(ticket)
            elif self.controller.is_counting(session_id):
                self._tick_job = self.after(self.tick_ms, _tick)
            self._render()

        self._tick_job = self.after(self.tick_ms, _tick)

    def _cancel_tick(self) -> None:
        if self._tick_job is not None:
            self.after_cancel(self._tick_job)
            self._tick_job = None

    def _skip_countdown(self) -> None:
        ticket = self.controller.skip()
        self._cancel_tick()
        if ticket:
            self._start_acquisition(ticket)
        self._render()

    def _start_acquisition(self, ticket) -> None:
        # Tk is single-threaded: fetch on a worker, poll for the outcome here
        threading.Thread(
            target=self.controller.run_acquisition,
            args=(ticket,),
            name="acquisition",
            daemon=True,
        ).start()
        self._poll_acquisition()

    def _poll_acquisition(self) -> None:
        state = self.controller.state
        if isinstance(state, StudyingState) and state.acquiring:
            self._poll_job = self.after(200, self._poll_acquisition)
            return
        self._poll_job = None
        self._render()
        if isinstance(state, SetupState) and state.error:
            messagebox.showerror(
                "Error",
                f"Error generating questions: {state.error}\n\n"
                "Check that the question service is running and its URL is correct.",
            )

    def _render(self) -> None:
        state = self.controller.state
        if isinstance(state, SetupState):
            self._show_frame(self.setup_frame)
            self._update_start_button()
        elif isinstance(state, StudyingState):
            if state.acquiring:
                self.countdown_label.config(text="Generating questions...", font=("Segoe UI", 20, "bold"))
                self.countdown_hint.config(text="Please wait a moment")
                self.skip_button.pack_forget()
            else:
                self.countdown_label.config(
                    text=format_countdown(state.remaining_seconds),
                    font=("Segoe UI", 48, "bold"),
                )
                self.countdown_hint.config(text="Time left")
                if not self.skip_button.winfo_ismapped():
                    self.skip_button.pack(pady=10)
            self._show_frame(self.studying_frame)
        elif isinstance(state, QuizState):
            if not self.question_container.winfo_children():
                self._render_questions(state)
            self._update_submit_button()
            self._show_frame(self.quiz_frame)
        elif isinstance(state, ResultsState):
            results = state.results
            self.feedback_label.config(
                text=feedback_message(results),
                foreground=FEEDBACK_COLORS[feedback_tier(results)],
            )
            self.correct_label.config(
                text=f"{results.correct} {'correct answer' if results.correct == 1 else 'correct answers'}"
            )
            self.incorrect_label.config(
                text=f"{results.incorrect} {'mistake' if results.incorrect == 1 else 'mistakes'}"
            )
            self._show_frame(self.results_frame)

    def _render_questions(self, state: QuizState) -> None:
        self._clear_questions()
        subject = state.config.subject
        count = len(state.questions)
        noun = "question" if count == 1 else "questions"
        self.quiz_header.config(
            text=f"{subject} questions - answer the {count} {noun} below"
            if subject
            else f"Answer the {count} {noun} below"
        )
        for index, question in enumerate(state.questions, start=1):
            block = ttk.LabelFrame(
                self.question_container,
                text=f"{index}. {question.statement}",
                padding=10,
            )
            block.pack(fill=tk.X, expand=True, pady=5, padx=5)
            variable = tk.StringVar(value=state.answers.get(question.id, ""))
            self.choice_vars[question.id] = variable
            for alternative in question.sorted_alternatives():
                ttk.Radiobutton(
                    block,
                    text=alternative.text,
                    value=alternative.id,
                    variable=variable,
                    command=lambda qid=question.id, var=variable: self._save_answer(qid, var.get()),
                ).pack(anchor=tk.W, pady=2)

    def _clear_questions(self) -> None:
        for child in self.question_container.winfo_children():
            child.destroy()
        self.choice_vars.clear()

    def _save_answer(self, question_id: str, alternative_id: str) -> None:
        self.controller.record_answer(question_id, alternative_id)
        self._update_submit_button()

    def _update_submit_button(self) -> None:
        state = self.controller.state
        if not isinstance(state, QuizState):
            return
        if state.all_answered:
            self.submit_button.config(text="Submit answers")
            self.submit_button.state(["!disabled"])
        else:
            self.submit_button.config(
                text=f"Answer all questions ({state.answered_count}/{len(state.questions)})"
            )
            self.submit_button.state(["disabled"])

    def _submit(self) -> None:
        if self.controller.submit() is None:
            return
        self._clear_questions()
        self._render()

    def _restart(self) -> None:
        self._cancel_tick()
        if self._poll_job is not None:
            self.after_cancel(self._poll_job)
            self._poll_job = None
        self.controller.restart()
        self._clear_questions()
        self.subject.set("")
        self.content.set("")
        self.question_count.set(str(DEFAULT_QUESTION_COUNT))
        self.study_minutes.set("")
        self._render()


if __name__ == "__main__":
    setup_console_logging()
    app = StudyApp()
    app.mainloop()
