"""Вопросы анкеты (английский и тамильский)

id вопросов никогда не переиспользуются: ответы хранятся по id.
"""


def _t(en: str, ta: str) -> dict:
    return {"en": en, "ta": ta}


YES_NO = [_t("Yes", "ஆம்"), _t("No", "இல்லை")]

FREQUENCY = [
    _t("Never", "ஒருபோதும் இல்லை"),
    _t("Occasionally", "எப்போதாவது"),
    _t("Regularly", "தொடர்ந்து"),
]


QUESTIONNAIRE = {
    "version": 3,
    "languages": ["en", "ta"],
    "parts": [
        {
            "id": "part_1_background_and_clinical",
            "title": _t("Background & Clinical Data", "பின்னணி மற்றும் மருத்துவ தகவல்"),
            "sections": [
                {
                    "id": "section_a_background_variables",
                    "title": _t("Background Information", "பின்னணி தகவல்"),
                    "questions": [
                        {
                            "id": "bg_age",
                            "number": "1",
                            "text": _t("Age (in years)", "வயது (ஆண்டுகளில்)"),
                            "type": "free_text",
                            "bounds": {"min": 18, "max": 60},
                        },
                        {
                            "id": "bg_education",
                            "number": "2",
                            "text": _t("Educational qualification", "கல்வித் தகுதி"),
                            "type": "single_choice",
                            "options": [
                                _t("No formal education", "முறையான கல்வி இல்லை"),
                                _t("School", "பள்ளிக் கல்வி"),
                                _t("Diploma", "டிப்ளோமா"),
                                _t("Graduate", "பட்டப்படிப்பு"),
                                _t("Postgraduate", "முதுகலை"),
                            ],
                        },
                        {
                            "id": "bg_occupation",
                            "number": "3",
                            "text": _t("Occupation", "தொழில்"),
                            "type": "single_choice",
                            "options": [
                                _t("Employed", "வேலையில் உள்ளவர்"),
                                _t("Self-employed", "சுயதொழில்"),
                                _t("Homemaker", "இல்லத்தரசி / இல்லத்தரசர்"),
                                _t("Unemployed", "வேலையில்லாதவர்"),
                            ],
                        },
                        {
                            "id": "bg_income",
                            "number": "4",
                            "text": _t("Monthly family income (in rupees)", "மாத குடும்ப வருமானம் (ரூபாயில்)"),
                            "type": "free_text",
                            "bounds": {"min": 0, "max": 10000000},
                        },
                        {
                            "id": "bg_distance",
                            "number": "5",
                            "text": _t(
                                "Distance from your residence to the hospital (in kms)",
                                "உங்கள் வீட்டிலிருந்து மருத்துவமனைக்கு உள்ள தொலைவு (கி.மீ)",
                            ),
                            "type": "free_text",
                            "bounds": {"min": 0, "max": 2000},
                        },
                        {
                            "id": "bg_marriage_duration",
                            "number": "6",
                            "text": _t("Duration of marriage (in years)", "திருமணமான காலம் (ஆண்டுகளில்)"),
                            "type": "free_text",
                            "bounds": {"min": 0, "max": 40},
                        },
                        {
                            "id": "bg_consanguinity",
                            "number": "7",
                            "text": _t("Consanguineous marriage", "உறவு முறைத் திருமணம்"),
                            "type": "single_choice",
                            "options": YES_NO,
                            "follow_up": _t(
                                "If yes, mention the degree of relation",
                                "ஆம் எனில், உறவின் முறையைக் குறிப்பிடவும்",
                            ),
                        },
                    ],
                },
                {
                    "id": "section_b_clinical_data",
                    "title": _t("Clinical Data", "மருத்துவ தகவல்"),
                    "questions": [
                        {
                            "id": "cl_infertility_duration",
                            "number": "8",
                            "text": _t("Duration of infertility (in years)", "கருவுறாமையின் காலம் (ஆண்டுகளில்)"),
                            "type": "free_text",
                            "bounds": {"min": 0, "max": 30},
                        },
                        {
                            "id": "cl_infertility_type",
                            "number": "9",
                            "text": _t("Type of infertility", "கருவுறாமையின் வகை"),
                            "type": "single_choice",
                            "options": [
                                _t("Primary", "முதன்மை"),
                                _t("Secondary", "இரண்டாம் நிலை"),
                            ],
                        },
                        {
                            "id": "cl_menarche_age",
                            "number": "10",
                            "text": _t("Age at menarche (in years)", "முதல் மாதவிடாய் வயது (ஆண்டுகளில்)"),
                            "type": "free_text",
                            "gender": "female",
                            "bounds": {"min": 8, "max": 20},
                        },
                        {
                            "id": "cl_cycle_pattern",
                            "number": "11",
                            "text": _t("Menstrual cycle pattern", "மாதவிடாய் சுழற்சி முறை"),
                            "type": "single_choice",
                            "gender": "female",
                            "options": [
                                _t("Regular", "சீரானது"),
                                _t("Irregular", "சீரற்றது"),
                            ],
                        },
                        {
                            "id": "cl_cycle_interval",
                            "number": "12",
                            "text": _t(
                                "Interval between cycles (in days)",
                                "சுழற்சிகளுக்கு இடையேயான இடைவெளி (நாட்களில்)",
                            ),
                            "type": "free_text",
                            "gender": "female",
                            "bounds": {"min": 15, "max": 60},
                        },
                        {
                            "id": "cl_menstruation_duration",
                            "number": "13",
                            "text": _t(
                                "Duration of menstruation (in days)",
                                "மாதவிடாய் காலம் (நாட்களில்)",
                            ),
                            "type": "free_text",
                            "gender": "female",
                            "bounds": {"min": 1, "max": 15},
                        },
                        {
                            "id": "cl_semen_analysis",
                            "number": "10",
                            "text": _t(
                                "Have you undergone semen analysis?",
                                "நீங்கள் விந்து பரிசோதனை செய்துள்ளீர்களா?",
                            ),
                            "type": "single_choice",
                            "gender": "male",
                            "options": YES_NO,
                            "follow_up": _t(
                                "If yes, mention the result",
                                "ஆம் எனில், முடிவைக் குறிப்பிடவும்",
                            ),
                        },
                        {
                            "id": "cl_comorbidities",
                            "number": "14",
                            "text": _t(
                                "Do you have any co-morbidities (diabetes, hypertension, thyroid disorder)?",
                                "உங்களுக்கு பிற நோய்கள் (நீரிழிவு, உயர் இரத்த அழுத்தம், தைராய்டு) உள்ளதா?",
                            ),
                            "type": "single_choice",
                            "options": YES_NO,
                            "follow_up": _t("If yes, specify", "ஆம் எனில், குறிப்பிடவும்"),
                        },
                    ],
                },
            ],
        },
        {
            "id": "part_2_lifestyle",
            "title": _t("Lifestyle", "வாழ்க்கை முறை"),
            "sections": [
                {
                    "id": "section_c_physical_activity",
                    "title": _t("Physical Activity", "உடல் செயல்பாடு"),
                    "questions": [
                        {
                            "id": "pa_exercise",
                            "number": "15",
                            "text": _t("Do you exercise regularly?", "நீங்கள் தொடர்ந்து உடற்பயிற்சி செய்கிறீர்களா?"),
                            "type": "single_choice",
                            "options": YES_NO,
                        },
                        {
                            "id": "pa_exercise_types",
                            "number": "16",
                            "text": _t(
                                "Type of physical exercises (choose all that apply)",
                                "எந்த வகையான உடற்பயிற்சி (பொருந்தும் அனைத்தையும் தேர்ந்தெடுக்கவும்)",
                            ),
                            "type": "single_choice",
                            "allow_multiple": True,
                            "options": [
                                _t("Walking", "நடைப்பயிற்சி"),
                                _t("Yoga", "யோகா"),
                                _t("Running", "ஓட்டம்"),
                                _t("Gym", "உடற்பயிற்சி கூடம்"),
                                _t("Sports", "விளையாட்டு"),
                                _t("None", "எதுவும் இல்லை"),
                            ],
                        },
                        {
                            "id": "pa_exercise_minutes",
                            "number": "17",
                            "text": _t(
                                "Total exercise time per week (in minutes)",
                                "வாரத்திற்கு மொத்த உடற்பயிற்சி நேரம் (நிமிடங்களில்)",
                            ),
                            "type": "free_text",
                            "bounds": {"min": 0, "max": 3000},
                        },
                    ],
                },
                {
                    "id": "section_d_diet_and_habits",
                    "title": _t("Diet & Habits", "உணவு மற்றும் பழக்கங்கள்"),
                    "questions": [
                        {
                            "id": "dh_diet",
                            "number": "18",
                            "text": _t("Type of diet", "உணவு வகை"),
                            "type": "single_choice",
                            "options": [
                                _t("Vegetarian", "சைவம்"),
                                _t("Non-vegetarian", "அசைவம்"),
                                _t("Eggetarian", "முட்டை உண்பவர்"),
                            ],
                        },
                        {
                            "id": "dh_food_habits",
                            "number": "19",
                            "text": _t(
                                "Food habits (choose all that apply)",
                                "உணவுப் பழக்கங்கள் (பொருந்தும் அனைத்தையும் தேர்ந்தெடுக்கவும்)",
                            ),
                            "type": "single_choice",
                            "allow_multiple": True,
                            "options": [
                                _t("Home-cooked food", "வீட்டில் சமைத்த உணவு"),
                                _t("Processed / junk food", "செயலாக்கப்பட்ட / சுகாதாரமற்ற உணவு"),
                                _t("Restaurant food", "உணவக உணவு"),
                            ],
                            "follow_up": _t(
                                "If processed or junk food, how many times per week?",
                                "செயலாக்கப்பட்ட உணவு எனில், வாரத்திற்கு எத்தனை முறை?",
                            ),
                        },
                        {
                            "id": "dh_smoking",
                            "number": "20",
                            "text": _t("Smoking", "புகைப்பிடித்தல்"),
                            "type": "single_choice",
                            "gender": "male",
                            "options": FREQUENCY,
                        },
                        {
                            "id": "dh_alcohol",
                            "number": "21",
                            "text": _t("Alcohol consumption", "மது அருந்துதல்"),
                            "type": "single_choice",
                            "gender": "male",
                            "options": FREQUENCY,
                        },
                        {
                            "id": "dh_coitus_frequency",
                            "number": "22",
                            "text": _t(
                                "Frequency of coitus per week",
                                "வாரத்திற்கு உடலுறவின் எண்ணிக்கை",
                            ),
                            "type": "free_text",
                            "bounds": {"min": 0, "max": 50},
                        },
                    ],
                },
                {
                    "id": "section_e_occupational_exposure",
                    "title": _t("Occupational Exposure", "தொழில் சார்ந்த வெளிப்பாடு"),
                    "questions": [
                        {
                            "id": "oe_heat_exposure",
                            "number": "23",
                            "text": _t(
                                "Does your work expose you to high heat (furnaces, driving long hours)?",
                                "உங்கள் வேலையில் அதிக வெப்பத்திற்கு (உலை, நீண்ட நேர வாகனம் ஓட்டுதல்) ஆளாகிறீர்களா?",
                            ),
                            "type": "single_choice",
                            "gender": "male",
                            "options": YES_NO,
                            "follow_up": _t(
                                "If yes, how many hours per day?",
                                "ஆம் எனில், ஒரு நாளைக்கு எத்தனை மணி நேரம்?",
                            ),
                        },
                        {
                            "id": "oe_laptop_use",
                            "number": "24",
                            "text": _t(
                                "Do you keep a laptop or phone on your lap or in your trouser pocket for long periods?",
                                "மடிக்கணினி அல்லது கைபேசியை நீண்ட நேரம் மடியில் அல்லது கால்சட்டைப் பையில் வைத்திருப்பீர்களா?",
                            ),
                            "type": "single_choice",
                            "gender": "male",
                            "options": YES_NO,
                        },
                    ],
                },
            ],
        },
        {
            "id": "part_3_psychological",
            "title": _t("Psychological Well-being", "மன நலம்"),
            "sections": [
                {
                    "id": "section_f_stress_and_support",
                    "title": _t("Stress & Support", "மன அழுத்தம் மற்றும் ஆதரவு"),
                    "questions": [
                        {
                            "id": "ps_stress_level",
                            "number": "25",
                            "text": _t(
                                "How would you rate your stress level?",
                                "உங்கள் மன அழுத்த அளவை எப்படி மதிப்பிடுவீர்கள்?",
                            ),
                            "type": "single_choice",
                            "options": [
                                _t("Low", "குறைவு"),
                                _t("Moderate", "மிதமானது"),
                                _t("High", "அதிகம்"),
                            ],
                        },
                        {
                            "id": "ps_complaints",
                            "number": "26",
                            "text": _t(
                                "Do you have any of these psychological complaints? (choose all that apply)",
                                "உங்களுக்கு இந்த மன உபாதைகள் ஏதேனும் உள்ளதா? (பொருந்தும் அனைத்தையும் தேர்ந்தெடுக்கவும்)",
                            ),
                            "type": "single_choice",
                            "allow_multiple": True,
                            "options": [
                                _t("Anxiety", "பதட்டம்"),
                                _t("Sleeplessness", "தூக்கமின்மை"),
                                _t("Irritability", "எரிச்சல்"),
                                _t("Low mood", "மனச்சோர்வு"),
                                _t("None", "எதுவும் இல்லை"),
                            ],
                        },
                        {
                            "id": "ps_exposure",
                            "number": "27",
                            "text": _t(
                                "Have you been exposed to any of the following? (choose all that apply)",
                                "கீழ்க்கண்டவற்றில் ஏதேனும் உங்களுக்கு வெளிப்பாடு உள்ளதா? (பொருந்தும் அனைத்தையும் தேர்ந்தெடுக்கவும்)",
                            ),
                            "type": "single_choice",
                            "allow_multiple": True,
                            "options": [
                                _t("Pesticides", "பூச்சிக்கொல்லிகள்"),
                                _t("Industrial chemicals", "தொழிற்சாலை இரசாயனங்கள்"),
                                _t("Radiation", "கதிர்வீச்சு"),
                                _t("Heavy metals", "கன உலோகங்கள்"),
                                _t("None", "எதுவும் இல்லை"),
                            ],
                        },
                        {
                            "id": "ps_family_support",
                            "number": "28",
                            "text": _t(
                                "Do you receive support from your family during treatment?",
                                "சிகிச்சையின் போது உங்கள் குடும்பத்திடமிருந்து ஆதரவு கிடைக்கிறதா?",
                            ),
                            "type": "single_choice",
                            "options": YES_NO,
                            "follow_up": _t(
                                "If yes, who supports you the most?",
                                "ஆம் எனில், உங்களுக்கு அதிகம் ஆதரவளிப்பவர் யார்?",
                            ),
                        },
                        {
                            "id": "ps_expectations",
                            "number": "29",
                            "text": _t(
                                "What do you expect from this program?",
                                "இந்தத் திட்டத்திலிருந்து நீங்கள் என்ன எதிர்பார்க்கிறீர்கள்?",
                            ),
                            "type": "free_text",
                        },
                    ],
                },
            ],
        },
    ],
}
