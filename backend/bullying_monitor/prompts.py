from __future__ import annotations
import json
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple

from .content import Language


_TASKS_HEADING = {
	Language.UZ: "Vazifangiz:",
	Language.RU: "Ваша задача:",
}

_RESPONSE_LANGUAGE = {
	Language.UZ: "Javob tili: O'zbek tili.",
	Language.RU: "Язык ответа: русский.",
}


@dataclass(frozen=True)
class PromptTemplate:
	"""Instruction for the generative service, kept as data rather than a string.

	``tasks`` and ``intro`` may reference ``str.format`` fields supplied at
	render time (for example ``{count}`` or ``{student}``).
	"""

	language: Language
	role: str
	tasks: Tuple[str, ...]
	intro: str
	notes: Tuple[str, ...] = ()
	output_format: str = ""
	thinking_budget: Optional[int] = None

	def render_system_instruction(self, **context: Any) -> str:
		lines = [self.role, _TASKS_HEADING[self.language]]
		lines.extend(f"{i}. {task.format(**context)}" for i, task in enumerate(self.tasks, start=1))
		lines.extend(self.notes)
		lines.append(_RESPONSE_LANGUAGE[self.language])
		if self.output_format:
			lines.append(self.output_format)
		return "\n".join(lines)

	def render_contents(self, payload: Any, **context: Any) -> str:
		data = json.dumps(payload, ensure_ascii=False, indent=2)
		return f"{self.intro.format(**context)}\n{data}"

	def with_thinking_budget(self, budget: Optional[int]) -> "PromptTemplate":
		return replace(self, thinking_budget=budget)


AGGREGATE_TEMPLATES: Dict[Language, PromptTemplate] = {
	Language.UZ: PromptTemplate(
		language=Language.UZ,
		role="Siz Guliston Davlat Pedagogika Instituti qoshidagi professional ta'lim psixologi va xulq-atvor tahlilchisiz.",
		tasks=(
			"Taqdim etilgan {count} ta so'rovnoma natijalari asosida umumiy vaziyatni baholash.",
			"Eng yuqori xavf guruhidagi sinflar va maktablarni aniqlash.",
			"Ma'muriyat va o'qituvchilar uchun bullingni kamaytirish bo'yicha amaliy tavsiyalar berish.",
			"Psixologik yordam ko'rsatish bo'yicha tavsiyalar berish.",
		),
		intro="Quyidagi maktab bulling monitoringi ma'lumotlarini tahlil qiling va hisobot tayyorlang:",
		notes=("Ballar 0 dan 4 gacha: ball qanchalik yuqori bo'lsa, bulling xavfi shunchalik yuqori.",),
		output_format="Javobni professional Markdown formatida bering.",
	),
	Language.RU: PromptTemplate(
		language=Language.RU,
		role="Вы профессиональный педагог-психолог и аналитик поведения при Гулистанском государственном педагогическом институте.",
		tasks=(
			"Оценить общую ситуацию на основе результатов {count} анкет.",
			"Выявить классы и школы с наиболее высоким уровнем риска.",
			"Дать администрации и учителям практические рекомендации по снижению буллинга.",
			"Дать рекомендации по психологической поддержке.",
		),
		intro="Проанализируйте следующие данные мониторинга школьного буллинга и подготовьте отчёт:",
		notes=("Баллы по шкале от 0 до 4: чем выше балл, тем выше риск буллинга.",),
		output_format="Оформите ответ как профессиональный отчёт в формате Markdown.",
	),
}

INDIVIDUAL_TEMPLATES: Dict[Language, PromptTemplate] = {
	Language.UZ: PromptTemplate(
		language=Language.UZ,
		role="Siz bolalar psixologi va o'smirlar bo'yicha mutaxassissiz.",
		tasks=(
			"Ushbu individual javoblar asosida o'quvchining ruhiy holatini baholang va xavf darajasini tushuntiring.",
			"O'quvchiga mos individual yordam va profilaktika usullarini taklif qiling.",
			"Sinf rahbari va ota-onalar uchun aniq harakatlar rejasini bering.",
		),
		intro="O'quvchi {student} ning javoblari:",
		output_format="Markdown formatida javob bering.",
	),
	Language.RU: PromptTemplate(
		language=Language.RU,
		role="Вы детский психолог и специалист по работе с подростками.",
		tasks=(
			"Оцените психологическое состояние ученика на основе индивидуальных ответов и объясните уровень риска.",
			"Предложите индивидуальные методы поддержки и профилактики.",
			"Дайте конкретный план действий для классного руководителя и родителей.",
		),
		intro="Ответы ученика {student}:",
		output_format="Ответьте в формате Markdown.",
	),
}
