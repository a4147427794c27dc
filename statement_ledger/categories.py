"""Category taxonomy and keyword tables used for classification.

Order matters: the classifier walks these tables top to bottom and the first
keyword found in the transaction text decides the category. Specific phrases
must therefore be listed before the generic words they contain (for example
"получение кредита" before the bare "кредит").
"""

OTHER_CATEGORY = "Прочее"
EQUIPMENT_CATEGORY = "Оборудование"
DEPRECIATION_CATEGORY = "Амортизация"

SELF_TRANSFER_CATEGORY = "Переводы между своими счетами"
TRANSFER_CATEGORY = "Переводы"

LOAN_GIVEN = "Выдача займа"
LOAN_RETURNED = "Возврат долга"
LOAN_RECEIVED = "Получение кредита"
LOAN_REPAID = "Погашение кредита"
DIVIDENDS_PAID = "Выплата дивидендов"
OWNER_CONTRIBUTION = "Взнос учредителя"

FINANCING_CATEGORIES = frozenset({
    LOAN_RECEIVED,
    LOAN_REPAID,
    DIVIDENDS_PAID,
    OWNER_CONTRIBUTION,
})

# Phrases that also contain bank brand tokens ("kaspi", "депозит") and would
# otherwise be captured by unrelated keywords further down.
SPECIAL_CASES: tuple[tuple[str, tuple[str, ...]], ...] = (
    (SELF_TRANSFER_CATEGORY, (
        "на kaspi депозит",
        "с kaspi депозита",
        "в kaspi банкомате",
        "в kaspi терминале",
        "отбасы банк. пополнение депозита",
    )),
    (TRANSFER_CATEGORY, (
        "с карты другого банка",
        "от карты",
        "на карту",
    )),
)

DEFAULT_TAXONOMY: tuple[tuple[str, tuple[str, ...]], ...] = (
    # Operating expenses
    ("Зарплата", ("зарплата", "salary", "оплата труда", "выплата зарплаты")),
    ("Аренда", ("аренда", "rent", "арендная плата", "плата за аренду")),
    ("Закупка товаров", ("закупка", "товары", "материалы", "сырье", "инвентарь")),
    ("Реклама и маркетинг", ("реклама", "маркетинг", "advertising", "продвижение", "smm")),
    ("Коммунальные услуги", (
        "прэк", "коммунал", "электро", "водоснаб", "за воду", "газоснабж", "за газ", "тепло",
        "квартплата", "жилищно-коммунальные",
    )),
    ("Связь и интернет", (
        "beeline", "tele2", "kcell", "activ", "altel", "интернет", "связь",
        "мобильная связь", "телефон",
    )),
    ("Транспортные расходы", (
        "транспорт", "бензин", "такси", "yandex", "яндекс", "bolt", "uber", "азс", "заправка",
    )),
    ("Ремонт и обслуживание", ("ремонт", "обслуживание", "сервис", "техобслуживание")),
    ("Канцтовары", ("канцтовары", "бумага", "ручки", "тетради", "офисные принадлежности")),
    ("Представительские расходы", ("представительские", "встречи", "переговоры", "бизнес-ланч")),
    ("Командировочные расходы", ("командировка", "гостиница", "отель", "hotel")),
    ("Подписки на сервисы", ("подписка", "subscription", "app", "приложение")),
    ("Страхование", ("страхование", "insurance", "страховка")),
    ("Банковские комиссии", ("комиссия", "банковская комиссия", "снятие наличных сверх лимита")),
    ("Налоги", ("налог", "ндс", "подоходный", "социальный налог")),
    ("Штрафы и пени", ("штраф", "пеня", "fine", "penalty")),

    # Capital expenditure
    (EQUIPMENT_CATEGORY, ("оборудование", "equipment", "техника", "компьютер", "принтер")),

    # Financing phrases that contain the generic words below
    (LOAN_RECEIVED, ("получение кредита", "кредит получен")),
    (LOAN_RETURNED, ("возврат долга", "возврат займа")),
    (OWNER_CONTRIBUTION, ("взнос учредителя", "вклад учредителя")),

    # Financial operations
    ("Проценты по кредитам", ("проценты", "interest", "процент по кредиту")),
    (LOAN_REPAID, ("оплата кредита", "погашение кредита", "kaspi кредит", "кредит")),
    (LOAN_GIVEN, ("займ", "заем", "выдача займа", "кредитование")),
    ("Лизинговые платежи", ("лизинг", "leasing", "лизинговый платеж")),
    (DIVIDENDS_PAID, ("дивиденды", "dividend", "выплата дивидендов")),
    ("Накопления и сбережения", ("накопления", "сбережения", "депозит", "вклад")),
    ("Личные траты", ("личные", "personal", "личные расходы")),

    # Income
    ("Операционный доход", ("доход", "revenue", "выручка", "операционный доход")),
    ("Прочие поступления", ("поступления", "поступление")),

    (TRANSFER_CATEGORY, ("перевод",)),

    # Everyday spending seen on personal cards used for business
    ("Детский сад", ("детвора", "детский сад", "садик", "детский клуб")),
    ("Аптека и здоровье", ("аптека", "фармаком", "pharmacy", "медицин", "врач", "клиника", "kromiadi")),
    ("Красота и здоровье", ("beauty", "салон", "spa", "будуар", "красота", "эстетика")),
    ("Магазины", (
        "магазин", "small", "fix price", "маркет", "modnopvl", "sabina", "овощифрукты", "спортмастер",
    )),
    ("Кафе и рестораны", (
        "кафе", "ресторан", "pub", "суши", "chechil", "chekhov", "magic villag", "бала парк",
    )),
    ("Развлечения", (
        "кино", "аттракцион", "парк", "билеты", "leone d'oro", "macdac", "призовой аттракцион",
    )),
    ("Банкоматы", ("банкомат", "терминал", "аппарат самообслуживания")),
    ("Недвижимость", ("крыша", "ипотека", "недвижимость")),
    ("Бизнес/Поставщики", ("ип ", "ип.", "ип,", "ип-", "ип_", "тоо ", "too ", "тoo ")),
)

# Counterparty name fragments that denote the account holder's own accounts,
# cash machines or generic labels rather than a real business partner.
INTERNAL_COUNTERPARTIES: tuple[str, ...] = (
    "kaspi депозит", "kaspi банкомат", "kaspi терминал", "другая карта", "kaspi bank",
    "отбасы банк", "наличные", "пополнение", "снятие", "перевод", "вклад", "депозит",
    "банкомат", "терминал", "прочее", "commission", "комиссия", "налог", "штраф", "пеня",
    "оплата", "погашение", "получение", "выдача", "взнос", "дивиденд", "сбережения",
    "накопления", "личные", "доход", "расход", "поступлени", "выручка", "revenue",
    "income", "expense", "other", "прочие",
)


def all_categories(
    taxonomy: tuple[tuple[str, tuple[str, ...]], ...] = DEFAULT_TAXONOMY,
    special_cases: tuple[tuple[str, tuple[str, ...]], ...] = SPECIAL_CASES,
) -> list[str]:
    """Return every category label in declaration order, ending with the default."""
    seen: list[str] = []
    for category, _keywords in (*special_cases, *taxonomy):
        if category not in seen:
            seen.append(category)
    if OTHER_CATEGORY not in seen:
        seen.append(OTHER_CATEGORY)
    return seen
