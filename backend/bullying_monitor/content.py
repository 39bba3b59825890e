"""Static survey content: questions, answer labels and localized messages."""
from __future__ import annotations
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class Language(str, Enum):
	UZ = "uz"
	RU = "ru"


class LocalizedText(BaseModel):
	model_config = ConfigDict(frozen=True)

	uz: str
	ru: str

	def get(self, language: Language) -> str:
		return self.ru if language == Language.RU else self.uz


class Question(BaseModel):
	model_config = ConfigDict(frozen=True)

	id: str
	text: LocalizedText


SURVEY_QUESTIONS: List[Question] = [
	Question(id="q1", text=LocalizedText(
		uz="Maktab hududida o'zingizni xavfsiz va xotirjam his qilasizmi?",
		ru="Чувствуете ли вы себя в безопасности и спокойно на территории школы?",
	)),
	Question(id="q2", text=LocalizedText(
		uz="Tengdoshlaringiz tomonidan kamsitish yoki nohaq munosabatga duch kelasizmi?",
		ru="Сталкиваетесь ли вы с дискриминацией или несправедливым отношением со стороны сверстников?",
	)),
	Question(id="q3", text=LocalizedText(
		uz="O'zingizga yoqmagan bo'lsa-da, guruh qoidalariga bo'ysunishga majbur bo'lasizmi?",
		ru="Приходится ли вам подчиняться правилам группы, даже если они вам не нравятся?",
	)),
	Question(id="q4", text=LocalizedText(
		uz="Sog'lig'ingiz uchun zararli bo'lgan tutunli yoki bug'li vositalardan foydalanishga qiziqasizmi?",
		ru="Интересуетесь ли вы использованием дымных или паровых средств, вредных для вашего здоровья?",
	)),
	Question(id="q5", text=LocalizedText(
		uz="Kayfiyatni sun'iy tarzda o'zgartiruvchi \"maxsus\" ichimliklarni tatib ko'rish takliflari bo'ladimi?",
		ru="Бывают ли предложения попробовать \"особые\" напитки, искусственно меняющие настроение?",
	)),
	Question(id="q6", text=LocalizedText(
		uz="Kattalar yoki tartib-qoidalarga qarshi chiqish orqali o'zingizni ko'rsatishni yoqtirasizmi?",
		ru="Нравится ли вам проявлять себя, идя против взрослых или установленных правил?",
	)),
	Question(id="q7", text=LocalizedText(
		uz="Sizni jamoat tadbirlaridan yoki guruh suhbatlaridan ataylab chetlatishadimi?",
		ru="Вас специально исключают из общественных мероприятий или групповых бесед?",
	)),
	Question(id="q8", text=LocalizedText(
		uz="Darslardan sababsiz qolish yoki intizomni buzish holatlari sizda kuzatiladimi?",
		ru="Наблюдаются ли у вас случаи прогулов уроков без причины или нарушения дисциплины?",
	)),
	Question(id="q9", text=LocalizedText(
		uz="Atrofingizdagilar sizni xavfli yoki tavakkalchilikka asoslangan ishlarga undashadimi?",
		ru="Побуждают ли окружающие вас к опасным или рискованным поступкам?",
	)),
	Question(id="q10", text=LocalizedText(
		uz="Internet tarmoqlarida sizga nisbatan bosim yoki haqoratlar bo'ladimi?",
		ru="Бывают ли в отношении вас давление или оскорбления в интернет-сетях?",
	)),
]

QUESTION_IDS: List[str] = [q.id for q in SURVEY_QUESTIONS]

MIN_SCORE = 0
MAX_SCORE = 4

# Index is the score
RESPONSE_LABELS: Dict[Language, List[str]] = {
	Language.UZ: ["Hech qachon", "Kamdan-kam", "Ba'zida", "Tez-tez", "Har doim"],
	Language.RU: ["Никогда", "Редко", "Иногда", "Часто", "Всегда"],
}

MESSAGES: Dict[str, Dict[Language, str]] = {
	"answer_all": {
		Language.UZ: "Iltimos, barcha savollarga javob bering!",
		Language.RU: "Пожалуйста, ответьте на все вопросы!",
	},
	"invalid_answers": {
		Language.UZ: "Javoblar noto'g'ri: har bir javob 0 dan 4 gacha bo'lgan butun son bo'lishi kerak.",
		Language.RU: "Неверные ответы: каждый ответ должен быть целым числом от 0 до 4.",
	},
	"thank_you": {
		Language.UZ: "Rahmat! Ma'lumotlaringiz muvaffaqiyatli saqlandi.",
		Language.RU: "Спасибо! Ваши данные успешно сохранены.",
	},
	"save_failed": {
		Language.UZ: "Ma'lumot saqlanmadi",
		Language.RU: "Данные не сохранены",
	},
	"load_failed": {
		Language.UZ: "Ma'lumotlar bazasi xatosi",
		Language.RU: "Ошибка базы данных",
	},
	"no_data": {
		Language.UZ: "Ma'lumotlar mavjud emas",
		Language.RU: "Нет данных",
	},
	"no_data_for_analysis": {
		Language.UZ: "Tahlil qilish uchun ma'lumotlar mavjud emas.",
		Language.RU: "Нет данных для анализа.",
	},
	"api_key_missing": {
		Language.UZ: "Gemini API kaliti topilmadi. GEMINI_API_KEY sozlamasini tekshiring.",
		Language.RU: "API ключ Gemini не найден. Проверьте настройку GEMINI_API_KEY.",
	},
	"analysis_failed": {
		Language.UZ: "AI tahlili jarayonida texnik xatolik yuz berdi.",
		Language.RU: "Произошла техническая ошибка при AI анализе.",
	},
	"individual_analysis_failed": {
		Language.UZ: "Individual tahlilda xatolik.",
		Language.RU: "Ошибка индивидуального анализа.",
	},
	"analysis_in_progress": {
		Language.UZ: "Tahlil allaqachon bajarilmoqda. Iltimos, kuting.",
		Language.RU: "Анализ уже выполняется. Пожалуйста, подождите.",
	},
	"wrong_password": {
		Language.UZ: "Xato parol!",
		Language.RU: "Неверный пароль!",
	},
	"confirm_delete": {
		Language.UZ: "Haqiqatdan ham barcha ma'lumotlarni o'chirmoqchimisiz?",
		Language.RU: "Вы действительно хотите удалить все данные?",
	},
	"deleted": {
		Language.UZ: "Barcha ma'lumotlar o'chirildi",
		Language.RU: "Все данные удалены",
	},
	"delete_not_confirmed": {
		Language.UZ: "O'chirish tasdiqlanmadi",
		Language.RU: "Удаление не подтверждено",
	},
	"not_found": {
		Language.UZ: "Javob topilmadi",
		Language.RU: "Ответ не найден",
	},
	"unknown_answer": {
		Language.UZ: "Noma'lum",
		Language.RU: "Неизвестно",
	},
	"high_risk": {
		Language.UZ: "Yuqori",
		Language.RU: "Высокий",
	},
	"medium_risk": {
		Language.UZ: "O'rta",
		Language.RU: "Средний",
	},
	"low_risk": {
		Language.UZ: "Past",
		Language.RU: "Низкий",
	},
	"report_title": {
		Language.UZ: "Bulling monitoringi bo'yicha AI tahlili",
		Language.RU: "AI анализ мониторинга буллинга",
	},
	"generated_at": {
		Language.UZ: "Yaratilgan vaqt",
		Language.RU: "Время создания",
	},
	"institution": {
		Language.UZ: "GULISTON DAVLAT PEDAGOGIKA INSTITUTI",
		Language.RU: "ГУЛИСТАНСКИЙ ГОСУДАРСТВЕННЫЙ ПЕДАГОГИЧЕСКИЙ ИНСТИТУТ",
	},
}


def message(key: str, language: Language) -> str:
	return MESSAGES[key][language]


def answer_label(score: Optional[int], language: Language) -> str:
	labels = RESPONSE_LABELS[language]
	if isinstance(score, int) and not isinstance(score, bool) and MIN_SCORE <= score <= MAX_SCORE:
		return labels[score]
	return message("unknown_answer", language)


def parse_language(value: Optional[str], default: Language = Language.UZ) -> Language:
	"""Lenient language lookup for query strings and settings; unknown codes fall back to ``default``."""
	if not value:
		return default
	try:
		return Language(value.strip().lower())
	except ValueError:
		return default
