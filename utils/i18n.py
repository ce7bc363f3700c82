"""Тексты интерфейса на английском и тамильском"""
import logging

logger = logging.getLogger(__name__)

LANGUAGE_NAMES = {
    "en": "English",
    "ta": "தமிழ்",
}

TEXTS = {
    "en": {
        "start_welcome": (
            "👋 Welcome to the fertility support program.\n\n"
            "This bot will guide you through the intake questionnaire. "
            "You can stop at any time and continue later from where you left off."
        ),
        "not_enrolled": (
            "Your account is not linked to the program yet. "
            "Please contact the program coordinator."
        ),
        "help_text": (
            "ℹ️ Commands\n\n"
            "/questionnaire — start or continue the questionnaire\n"
            "/status — your progress\n"
            "/help — this message"
        ),
        "btn_start_questionnaire": "📝 Start questionnaire",
        "choose_language": "Choose your language / மொழியைத் தேர்ந்தெடுக்கவும்",
        "existing_progress": "ℹ️ You have existing progress ({percent}% complete) in {language}.",
        "resume_suffix": " — Resume →",
        "lang_switch_warning": (
            "⚠️ Changing the language will delete your previous answers and restart "
            "the questionnaire from the first question. Do you want to continue?"
        ),
        "btn_switch_confirm": "Continue",
        "btn_switch_cancel": "Cancel",
        "lang_switch_cancelled": "Your answers were kept. Choose how to continue:",
        "already_complete": "✅ Questionnaire already completed! Thank you.",
        "resumed_notice": "Welcome back! Continuing where you left off.",
        "drift_notice": "The questionnaire was updated, so we've resumed you near where you left off.",
        "question_header": "{part} › {section}\nQuestion {current} of {total}",
        "progress": "Progress: {answered}/{total} ({percent}%)",
        "input_text": "✍️ Type your answer:",
        "previous_answer": "Your previous answer: {value}",
        "btn_back": "⬅️ Previous",
        "btn_next": "Next ➡️",
        "btn_keep_answer": "Keep answer ➡️",
        "btn_sections": "📑 Sections",
        "btn_save_exit": "💾 Save & exit",
        "btn_skip_follow_up": "Skip",
        "btn_close_sections": "↩️ Back to question",
        "sections_title": "📑 Sections\n\nTap a section to jump to its first question.",
        "answer_required": "Please answer this question.",
        "answer_invalid_option": "Please choose one of the options.",
        "answer_single_only": "Select an option to continue.",
        "answer_not_number": "Please enter a number.",
        "answer_out_of_range": "Please enter a value between {min} and {max}.",
        "save_failed": "⚠️ Failed to save. Please try again.",
        "session_changed": "⚠️ Your questionnaire was restarted from another chat. Please choose your language again.",
        "language_unavailable": "This language is not available. Please choose one of the following:",
        "progress_saved": "💾 Progress saved! Send /questionnaire to continue later.",
        "questionnaire_completed": "🎉 Questionnaire completed! Thank you for your answers.",
        "status_info": "📊 Answered: {answered} of {total} ({percent}%)\nRemaining: {remaining}",
        "status_no_session": "You have not started the questionnaire yet. Send /questionnaire.",
        "your_answers": "📋 Your answers:",
    },
    "ta": {
        "start_welcome": (
            "👋 கருவுறுதல் ஆதரவு திட்டத்திற்கு வரவேற்கிறோம்.\n\n"
            "இந்த பாட் உங்களை சேர்க்கை கேள்வித்தாள் வழியாக அழைத்துச் செல்லும். "
            "எப்போது வேண்டுமானாலும் நிறுத்தி, பின்னர் விட்ட இடத்திலிருந்து தொடரலாம்."
        ),
        "not_enrolled": (
            "உங்கள் கணக்கு இன்னும் திட்டத்துடன் இணைக்கப்படவில்லை. "
            "திட்ட ஒருங்கிணைப்பாளரைத் தொடர்பு கொள்ளவும்."
        ),
        "help_text": (
            "ℹ️ கட்டளைகள்\n\n"
            "/questionnaire — கேள்வித்தாளைத் தொடங்க அல்லது தொடர\n"
            "/status — உங்கள் முன்னேற்றம்\n"
            "/help — இந்த செய்தி"
        ),
        "btn_start_questionnaire": "📝 கேள்வித்தாளைத் தொடங்கு",
        "choose_language": "Choose your language / மொழியைத் தேர்ந்தெடுக்கவும்",
        "existing_progress": "ℹ️ {language} மொழியில் உங்கள் முன்னேற்றம் உள்ளது ({percent}% முடிந்தது).",
        "resume_suffix": " — தொடர் →",
        "lang_switch_warning": (
            "⚠️ மொழியை மாற்றினால் உங்கள் பழைய பதில்கள் அழிக்கப்பட்டு, கேள்வித்தாள் "
            "முதல் கேள்வியிலிருந்து மீண்டும் தொடங்கும். தொடர விரும்புகிறீர்களா?"
        ),
        "btn_switch_confirm": "தொடர்",
        "btn_switch_cancel": "ரத்து செய்",
        "lang_switch_cancelled": "உங்கள் பதில்கள் வைக்கப்பட்டுள்ளன. எப்படித் தொடர வேண்டும் என்பதைத் தேர்ந்தெடுக்கவும்:",
        "already_complete": "✅ கேள்வித்தாள் ஏற்கனவே முடிந்தது! நன்றி.",
        "resumed_notice": "மீண்டும் வருக! விட்ட இடத்திலிருந்து தொடர்கிறோம்.",
        "drift_notice": "கேள்வித்தாள் புதுப்பிக்கப்பட்டதால், நீங்கள் விட்ட இடத்திற்கு அருகிலிருந்து தொடர்கிறோம்.",
        "question_header": "{part} › {section}\nகேள்வி {current} / {total}",
        "progress": "முன்னேற்றம்: {answered}/{total} ({percent}%)",
        "input_text": "✍️ உங்கள் பதிலை உள்ளிடவும்:",
        "previous_answer": "உங்கள் முந்தைய பதில்: {value}",
        "btn_back": "⬅️ முந்தைய",
        "btn_next": "அடுத்து ➡️",
        "btn_keep_answer": "பதிலை வைத்திரு ➡️",
        "btn_sections": "📑 பிரிவுகள்",
        "btn_save_exit": "💾 சேமித்து வெளியேறு",
        "btn_skip_follow_up": "தவிர்",
        "btn_close_sections": "↩️ கேள்விக்குத் திரும்பு",
        "sections_title": "📑 பிரிவுகள்\n\nஒரு பிரிவின் முதல் கேள்விக்குச் செல்ல அதைத் தட்டவும்.",
        "answer_required": "தயவுசெய்து இந்த கேள்விக்கு பதிலளிக்கவும்.",
        "answer_invalid_option": "தயவுசெய்து ஒரு விருப்பத்தைத் தேர்ந்தெடுக்கவும்.",
        "answer_single_only": "தொடர ஒரு விருப்பத்தைத் தேர்ந்தெடுக்கவும்.",
        "answer_not_number": "தயவுசெய்து ஒரு எண்ணை உள்ளிடவும்.",
        "answer_out_of_range": "{min} முதல் {max} வரையிலான மதிப்பை உள்ளிடவும்.",
        "save_failed": "⚠️ சேமிக்க முடியவில்லை. தயவுசெய்து மீண்டும் முயற்சிக்கவும்.",
        "session_changed": "⚠️ உங்கள் கேள்வித்தாள் வேறொரு அரட்டையில் மீண்டும் தொடங்கப்பட்டது. தயவுசெய்து மொழியை மீண்டும் தேர்ந்தெடுக்கவும்.",
        "language_unavailable": "இந்த மொழி கிடைக்கவில்லை. கீழே உள்ளவற்றில் ஒன்றைத் தேர்ந்தெடுக்கவும்:",
        "progress_saved": "💾 முன்னேற்றம் சேமிக்கப்பட்டது! பின்னர் தொடர /questionnaire அனுப்பவும்.",
        "questionnaire_completed": "🎉 கேள்வித்தாள் முடிந்தது! உங்கள் பதில்களுக்கு நன்றி.",
        "status_info": "📊 பதிலளித்தவை: {answered} / {total} ({percent}%)\nமீதமுள்ளவை: {remaining}",
        "status_no_session": "நீங்கள் இன்னும் கேள்வித்தாளைத் தொடங்கவில்லை. /questionnaire அனுப்பவும்.",
        "your_answers": "📋 உங்கள் பதில்கள்:",
    },
}


def get_text(lang: str, key: str, **kwargs) -> str:
    """Получить текст по ключу; при отсутствии перевода — английский"""
    texts = TEXTS.get(lang) or TEXTS["en"]
    template = texts.get(key) or TEXTS["en"].get(key)
    if template is None:
        logger.warning(f"Нет текста для ключа {key!r}")
        return key
    return template.format(**kwargs) if kwargs else template
