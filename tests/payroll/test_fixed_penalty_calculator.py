from src.lesson_payroll.lesson_payroll.core.enums import LessonAction
from src.lesson_payroll.lesson_payroll.payroll.calculator.fixed_penalty_calculator import FixedPenaltyCalculator
from src.lesson_payroll.lesson_payroll.settings.model import PenaltyConfig


def test_missing_voice_and_text_on_two_lessons(make_lesson):
    lessons = [make_lesson(), make_lesson(voice=False), make_lesson(text=False)]

    breakdown = FixedPenaltyCalculator().calculate(lessons, PenaltyConfig.uniform(1000))

    assert breakdown.total == 2000
    assert breakdown.amount_for(LessonAction.VOICE) == 1000
    assert breakdown.amount_for(LessonAction.TEXT) == 1000
    assert breakdown.missed[LessonAction.ABSENCE] == 0


def test_penalty_ignores_obligation_threshold(make_lesson):
    # 9 of 10 lessons sent voice: obligation is done, the one miss is still charged.
    lessons = [make_lesson() for _ in range(9)] + [make_lesson(voice=False)]

    breakdown = FixedPenaltyCalculator().calculate(lessons, PenaltyConfig.uniform(1000))

    assert breakdown.total == 1000


def test_per_action_amounts(make_lesson):
    config = PenaltyConfig(
        penalty_absence_amd=500,
        penalty_feedback_amd=700,
        penalty_voice_amd=0,
        penalty_text_amd=300,
    )
    lesson = make_lesson(absence=False, feedbacks=False, voice=False, text=False)

    calc = FixedPenaltyCalculator()

    assert calc.lesson_penalty(lesson, config) == 1500
    assert calc.calculate([lesson], config).to_dict()["by_action"]["voice"] == {"missed": 1, "amount": 0}


def test_no_lessons_no_penalty():
    assert FixedPenaltyCalculator().calculate([], PenaltyConfig.uniform(1000)).total == 0
