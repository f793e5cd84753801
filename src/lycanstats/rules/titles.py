"""
Built-in title rules.

Plain data: the shapes here are also the shapes accepted in a YAML/JSON rule
file (see rules/table.py), so keys use the same camelCase names.
"""

# ============================================================================
# STAT REGISTRY
# ============================================================================

# Every percentile stat, the title family it feeds, and extra names that
# combination conditions may use for it.
STAT_REGISTRY = [
    {"stat": "talkingPer60Min", "titleKey": "talking"},
    {"stat": "talkingOutsidePer60Min", "titleKey": "talkingOutsideMeeting"},
    {"stat": "talkingDuringPer60Min", "titleKey": "talkingDuringMeeting"},
    {"stat": "killRate", "titleKey": "killRate"},
    {"stat": "killRateVillageois", "titleKey": None},
    {"stat": "killRateLoup", "titleKey": None},
    {"stat": "killRateSolo", "titleKey": None},
    {"stat": "survivalRate", "titleKey": "survival"},
    {"stat": "survivalDay1Rate", "titleKey": "survivalDay1"},
    {"stat": "lootPer60Min", "titleKey": "loot"},
    {"stat": "lootVillageoisPer60Min", "titleKey": "lootVillageois"},
    {"stat": "lootLoupPer60Min", "titleKey": "lootLoup"},
    {"stat": "votingAggressiveness", "titleKey": "votingAggressive"},
    {"stat": "votingFirst", "titleKey": "votingFirst"},
    {"stat": "votingAccuracy", "titleKey": "votingAccuracy"},
    {"stat": "hunterAccuracy", "titleKey": "hunterAccuracy"},
    {"stat": "winRate", "titleKey": "winRate"},
    {"stat": "winRateVillageois", "titleKey": "winRateVillageois"},
    {"stat": "winRateLoup", "titleKey": "winRateLoup"},
    {"stat": "winRateSolo", "titleKey": "winRateSolo"},
    {"stat": "longestWinSeries", "titleKey": "winSeries"},
    {"stat": "longestLossSeries", "titleKey": "lossSeries"},
    {"stat": "gamesPlayed", "titleKey": "participation"},
    {"stat": "campVillageoisPercent", "titleKey": None},
    {"stat": "campLoupPercent", "titleKey": None},
    {"stat": "campSoloPercent", "titleKey": None, "aliases": ["campSolo"]},
]

# ============================================================================
# BASIC TITLES
# ============================================================================

TITLE_DEFINITIONS = {
    # Talking
    "talking": {
        "high": {"title": "Le·a Bavard·e", "emoji": "🗣️", "description": "Parle beaucoup (par 60 min de jeu)"},
        "average": {"title": "Le·a Équilibré·e", "emoji": "⚖️", "description": "Temps de parole normal"},
        "low": {"title": "Le·a Silencieux·se", "emoji": "🤫", "description": "Parle peu (par 60 min de jeu)"},
        "extremeHigh": {"title": "Le Moulin à Paroles", "emoji": "💬", "description": "Parle énormément"},
        "extremeLow": {"title": "Le·a Fantôme", "emoji": "👻", "description": "Quasi muet·te"},
    },
    "talkingOutsideMeeting": {
        "high": {"title": "Le·a Chuchoteur·se", "emoji": "👂", "description": "Bavard·e hors meeting"},
        "low": {"title": "Le·a Concentré·e", "emoji": "🎯", "description": "Silencieux·se hors meeting"},
    },
    "talkingDuringMeeting": {
        "high": {"title": "L'Orateur·rice", "emoji": "🎤", "description": "Bavard·e en meeting"},
        "low": {"title": "Le·a Discret·ète", "emoji": "🤐", "description": "Silencieux·se en meeting"},
    },
    # Kills
    "killRate": {
        "high": {"title": "Le·a Prédateur·rice", "emoji": "🐺", "description": "Taux de kills élevé"},
        "low": {"title": "Le·a Non-Violent·e", "emoji": "✌️", "description": "Taux de kills faible"},
        "extremeHigh": {"title": "L'Exterminateur·rice", "emoji": "💀", "description": "Tueur·se en série"},
        "extremeLow": {"title": "L'Agneau", "emoji": "🐑", "description": "Ne tue jamais"},
    },
    # Survival
    "survival": {
        "high": {"title": "Le·a Survivant·e", "emoji": "🛡️", "description": "Survie élevée fin de game"},
        "low": {"title": "La Cible", "emoji": "🎯", "description": "Meurt souvent"},
    },
    "survivalDay1": {
        "high": {"title": "Le·a Vigilant·e", "emoji": "🏃", "description": "Survit au Jour 1"},
        "low": {"title": "La Première Victime", "emoji": "⚰️", "description": "Meurt souvent Jour 1"},
    },
    # Loot
    "loot": {
        "high": {"title": "Le·a Récolteur·euse", "emoji": "🧺", "description": "Récolte élevée"},
        "average": {"title": "Le·a Travailleur·se", "emoji": "👷", "description": "Récolte correcte"},
        "low": {"title": "Le·a Flâneur·se", "emoji": "🚶", "description": "Récolte faible"},
        "extremeHigh": {"title": "Le·a Stakhanoviste", "emoji": "⚒️", "description": "Récolte exceptionnelle"},
        "extremeLow": {"title": "Le·a Touriste", "emoji": "📸", "description": "Ne récolte jamais"},
    },
    "lootVillageois": {
        "high": {"title": "Le·a Citoyen·ne Modèle", "emoji": "🏘️", "description": "Récolte excellente en Villageois"},
        "low": {"title": "Le·a Villageois·e Paresseux·se", "emoji": "💤", "description": "Faible récolte en Villageois"},
    },
    "lootLoup": {
        "high": {"title": "Le Loup Discret", "emoji": "🐺", "description": "Récolte élevée en Loup"},
        "low": {"title": "Le Loup Impatient", "emoji": "😤", "description": "Faible récolte en Loup"},
    },
    # Voting
    "votingAggressive": {
        "high": {"title": "L'Agitateur·rice", "emoji": "📢", "description": "Voteur·se agressif·ve"},
        "low": {"title": "Le·a Sage", "emoji": "🧘", "description": "Voteur·se passif·ve"},
        "extremeHigh": {"title": "Le·a Tribun·e", "emoji": "⚖️", "description": "Toujours en action"},
        "extremeLow": {"title": "L'Indécis·e", "emoji": "🤷", "description": "Vote rarement"},
    },
    "votingFirst": {
        "high": {"title": "L'Impulsif·ve", "emoji": "🏃", "description": "Premier·ère voteur·se"},
        "low": {"title": "Le·a Stratège", "emoji": "🧠", "description": "Attend avant de voter"},
    },
    "votingAccuracy": {
        "high": {"title": "Le·a Flaireur·se", "emoji": "👃", "description": "Bon instinct de vote"},
        "low": {"title": "L'Aveugle", "emoji": "🙈", "description": "Mauvais instinct de vote"},
    },
    # Hunter
    "hunterAccuracy": {
        "high": {"title": "Le·a Sniper", "emoji": "🎯", "description": "Bon·ne chasseur·se (tue des ennemis)"},
        "low": {"title": "Le·a Myope", "emoji": "👓", "description": "Mauvais·e chasseur·se (tue des alliés)"},
        "extremeHigh": {"title": "L'Exécuteur·rice", "emoji": "⚔️", "description": "Chasseur·se parfait·e"},
        "extremeLow": {
            "title": "Le·a Chasseur·se Maudit·e",
            "emoji": "💔",
            "description": "Tire toujours sur les mauvaises cibles",
        },
    },
    # Win rates
    "winRate": {
        "high": {"title": "Le·a Winner", "emoji": "🏆", "description": "Taux de victoire élevé"},
        "average": {"title": "Le·a Constant·e", "emoji": "📊", "description": "Performance stable"},
        "low": {"title": "Le·a Looser", "emoji": "😢", "description": "Taux de victoire faible"},
        "extremeHigh": {"title": "L'Inarrêtable", "emoji": "👑", "description": "Gagne presque toujours"},
        "extremeLow": {"title": "Le·a Maudit·e", "emoji": "🪦", "description": "Perd presque toujours"},
    },
    "winRateVillageois": {
        "high": {
            "title": "Le·a Protecteur·rice du Village",
            "emoji": "🦸",
            "description": "Excellent·e en camp Villageois",
        },
        "low": {"title": "Idiot·e en Formation", "emoji": "🤡", "description": "Mauvais·e en camp Villageois"},
    },
    "winRateLoup": {
        "high": {"title": "Le·a Chef·fe de Meute", "emoji": "🐺", "description": "Excellent·e en camp Loup"},
        "low": {"title": "Loup Débutant·e", "emoji": "🐩", "description": "Mauvais·e en camp Loup"},
    },
    "winRateSolo": {
        "high": {"title": "L'Électron Libre", "emoji": "🦊", "description": "Excellent·e en rôles Solo"},
        "low": {"title": "L'Enfant Perdu·e", "emoji": "👶", "description": "Mauvais·e en rôles Solo"},
    },
    # Series
    "winSeries": {
        "high": {"title": "En Feu", "emoji": "🔥", "description": "Grosse série de victoires"},
    },
    "lossSeries": {
        "high": {"title": "Glacé·e", "emoji": "❄️", "description": "Grosse série de défaites"},
    },
    # Role assignment luck
    "campAssignment": {
        "villageois": {"title": "Serial Villageois·e", "emoji": "🏘️", "description": "Joue souvent Villageois"},
        "loup": {"title": "Serial Loup", "emoji": "🌙", "description": "Joue souvent Loup"},
        "solo": {"title": "Serial Solo", "emoji": "🎭", "description": "Joue souvent en Solo"},
    },
    "roleAssignment": {
        "chasseur": {"title": "Serial Chasseur", "emoji": "🔫", "description": "Joue souvent Chasseur"},
        "alchimiste": {"title": "Serial Alchimiste", "emoji": "⚗️", "description": "Joue souvent Alchimiste"},
        "amoureux": {"title": "Serial Amoureux", "emoji": "💕", "description": "Joue souvent Amoureux"},
        "agent": {"title": "Serial Agent", "emoji": "🕵️", "description": "Joue souvent Agent"},
        "espion": {"title": "Serial Espion", "emoji": "🔍", "description": "Joue souvent Espion"},
        "idiot": {"title": "Serial Idiot", "emoji": "🃏", "description": "Joue souvent Idiot du Village"},
        "chasseurDePrime": {
            "title": "Serial Bounty Hunter",
            "emoji": "💰",
            "description": "Joue souvent Chasseur de Prime",
        },
        "contrebandier": {"title": "Serial Contrebandier", "emoji": "📦", "description": "Joue souvent Contrebandier"},
        "bete": {"title": "Serial Bête", "emoji": "🦁", "description": "Joue souvent La Bête"},
        "vaudou": {"title": "Serial Vaudou", "emoji": "🎃", "description": "Joue souvent Vaudou"},
        "scientifique": {"title": "Serial Scientifique", "emoji": "🔬", "description": "Joue souvent Scientifique"},
    },
    # Participation
    "participation": {
        "high": {"title": "Le·a Noctambule", "emoji": "🌙", "description": "Joue énormément de parties"},
        "low": {"title": "Le·a Occasionnel·le", "emoji": "🎲", "description": "Joue peu de parties"},
    },
    # Camp versatility
    "campBalance": {
        "balanced": {
            "title": "Le·a Polyvalent·e",
            "emoji": "🎭",
            "description": "Performance équilibrée dans tous les camps",
        },
        "specialist": {"title": "Le·a Spécialiste", "emoji": "🎯", "description": "Excellent dans un camp spécifique"},
    },
}

# Effective role (power or normalised initial role) -> roleAssignment key
ROLE_TITLE_KEYS = {
    "Chasseur": "chasseur",
    "Alchimiste": "alchimiste",
    "Amoureux": "amoureux",
    "Agent": "agent",
    "Espion": "espion",
    "Idiot du Village": "idiot",
    "Chasseur de Prime": "chasseurDePrime",
    "Contrebandier": "contrebandier",
    "La Bête": "bete",
    "Vaudou": "vaudou",
    "Scientifique": "scientifique",
}

# ============================================================================
# COMBINATION TITLES
# ============================================================================


def _high(stat, lenient=False):
    condition = {"stat": stat, "category": "HIGH"}
    if lenient:
        condition["minCategory"] = "ABOVE_AVERAGE"
    return condition


def _low(stat, lenient=False):
    condition = {"stat": stat, "category": "LOW"}
    if lenient:
        condition["minCategory"] = "BELOW_AVERAGE"
    return condition


COMBINATION_TITLES = [
    {
        "id": "legende",
        "title": "La Légende",
        "emoji": "🏅",
        "description": "Gagne tout le temps + grosses séries",
        "conditions": [
            {"stat": "winRate", "category": "EXTREME_HIGH"},
            _high("winSeries"),
            {"stat": "gamesPlayed", "minValue": 100},
        ],
        "priority": 20,
    },
    {
        "id": "mvp",
        "title": "Le·a MVP",
        "emoji": "⭐",
        "description": "Gagne, récolte, et survit",
        "conditions": [_high("winRate", True), _high("loot", True), _high("survival", True)],
        "priority": 19,
    },
    {
        "id": "justicier",
        "title": "Le·a Justicier·ère",
        "emoji": "⚔️",
        "description": "Chasseur·se qui vise juste, tue souvent et survit",
        "conditions": [_high("hunterAccuracy"), _high("killRate"), _high("survival")],
        "priority": 18,
    },
    {
        "id": "adaptable",
        "title": "Le·a Caméléon",
        "emoji": "🦎",
        "description": "Bon dans tous les camps",
        "conditions": [
            _high("winRateVillageois", True),
            _high("winRateLoup", True),
            _high("winRateSolo", True),
        ],
        "priority": 18,
    },
    {
        "id": "loup_solitaire",
        "title": "Le Loup Solitaire",
        "emoji": "🐺",
        "description": "Loup efficace, discret et gagnant",
        "conditions": [_high("lootLoup"), _high("winRateLoup"), _low("talking")],
        "priority": 18,
    },
    {
        "id": "machine",
        "title": "La Machine",
        "emoji": "⚙️",
        "description": "Récolte énormément sans dire un mot",
        "conditions": [
            {"stat": "loot", "category": "EXTREME_HIGH"},
            {"stat": "talking", "category": "EXTREME_LOW"},
        ],
        "priority": 18,
    },
    {
        "id": "commentateur",
        "title": "Le·a Commentateur·rice",
        "emoji": "📻",
        "description": "Ne fait que parler, ne récolte rien et tue peu",
        "conditions": [
            {"stat": "talking", "category": "EXTREME_HIGH", "minCategory": "ABOVE_AVERAGE"},
            _low("loot"),
            _low("killRate"),
        ],
        "priority": 17,
    },
    {
        "id": "phoenix",
        "title": "Le Phoenix",
        "emoji": "🔥",
        "description": "Meurt souvent tôt mais survit jusqu'au bout après",
        "conditions": [_low("survivalDay1", True), _high("survival")],
        "priority": 17,
    },
    {
        "id": "robot",
        "title": "Le·a Robot",
        "emoji": "🤖",
        "description": "Productif·ve, survit, parle peu",
        "conditions": [_high("loot"), _high("survival"), _low("talking")],
        "priority": 17,
    },
    {
        "id": "pitre",
        "title": "Le·a Pitre",
        "emoji": "🎪",
        "description": "Bavard·e, improductif·ve, meurt souvent",
        "conditions": [_high("talking"), _low("loot"), _low("survival", True)],
        "priority": 17,
    },
    {
        "id": "maitre_ceremonie",
        "title": "Le·a Maître·sse de Cérémonie",
        "emoji": "🎙️",
        "description": "Mène les débats et vote juste",
        "conditions": [
            _high("talkingDuringMeeting"),
            _high("votingAccuracy", True),
            _high("votingAggressive", True),
        ],
        "priority": 16,
    },
    {
        "id": "manipulateur",
        "title": "Le·a Manipulateur·rice",
        "emoji": "🐍",
        "description": "Loup bavard·e et gagnant·e",
        "conditions": [_high("winRateLoup"), _high("talking")],
        "priority": 16,
    },
    {
        "id": "diplomate",
        "title": "Le·a Diplomate",
        "emoji": "🤝",
        "description": "Gagne en survivant sans tuer",
        "conditions": [_high("survival"), _low("killRate", True), _high("winRate")],
        "priority": 16,
    },
    {
        "id": "politicien",
        "title": "Le·a Politicien·ne",
        "emoji": "🎩",
        "description": "Parle beaucoup, survit, mais ne récolte pas",
        "conditions": [_high("talking"), _high("survival"), _low("loot")],
        "priority": 16,
    },
    {
        "id": "loup_alpha",
        "title": "Le Loup Alpha",
        "emoji": "🐺",
        "description": "Survit et domine en Loup",
        "conditions": [_high("survival"), _high("winRateLoup"), _high("killRateLoup")],
        "priority": 15,
    },
    {
        "id": "infiltrateur",
        "title": "L'Infiltré·e",
        "emoji": "🎭",
        "description": "Excellent·e loup discret·ète",
        "conditions": [_high("winRateLoup"), _low("talking")],
        "priority": 15,
    },
    {
        "id": "monsieur_madame_tout_le_monde",
        "title": "Monsieur·Madame Tout-le-Monde",
        "emoji": "👤",
        "description": "Performance moyenne partout",
        "conditions": [
            {"stat": "talking", "category": "AVERAGE"},
            {"stat": "loot", "category": "AVERAGE"},
            {"stat": "winRate", "category": "AVERAGE"},
        ],
        "priority": 15,
    },
    {
        "id": "invisible",
        "title": "L'Invisible",
        "emoji": "👁️",
        "description": "Quasi muet·te mais redoutablement efficace",
        "conditions": [{"stat": "talking", "category": "EXTREME_LOW"}, _high("winRate")],
        "priority": 15,
    },
    {
        "id": "traitre",
        "title": "Le·a Traître·sse",
        "emoji": "🦹",
        "description": "Gagnant·e dans tous les camps ennemis des Villageois",
        "conditions": [_high("winRateLoup"), _high("winRateSolo")],
        "priority": 14,
    },
    {
        "id": "citoyen_exemplaire",
        "title": "Le·a Citoyen·ne Exemplaire",
        "emoji": "👑",
        "description": "Récolte et gagne en Villageois",
        "conditions": [_high("lootVillageois"), _high("winRateVillageois")],
        "priority": 14,
    },
    {
        "id": "assassin",
        "title": "L'Assassin",
        "emoji": "🗡️",
        "description": "Ignore la récolte, se concentre sur les kills",
        "conditions": [_low("loot"), _high("killRate")],
        "priority": 14,
    },
    {
        "id": "anarchiste",
        "title": "L'Anarchiste",
        "emoji": "🦊",
        "description": "Maître des rôles solitaires",
        "conditions": [_high("campSolo"), _high("winRateSolo")],
        "priority": 14,
    },
    {
        "id": "populiste",
        "title": "Le·a Populiste",
        "emoji": "📢",
        "description": "Bruyant·e et actif·ve mais se trompe de cible",
        "conditions": [_high("talking"), _high("votingAggressive"), _low("votingAccuracy")],
        "priority": 13,
    },
    {
        "id": "tete_brulee",
        "title": "La Tête Brûlée",
        "emoji": "💣",
        "description": "Tue beaucoup mais fait perdre son camp",
        "conditions": [_high("killRate"), _low("winRate")],
        "priority": 13,
    },
    {
        "id": "sacrifice",
        "title": "Le·a Sacrifié·e",
        "emoji": "🕯️",
        "description": "Meurt rapidement mais fait gagner son camp",
        "conditions": [_low("survivalDay1"), _low("survival"), _high("winRate")],
        "priority": 13,
    },
    {
        "id": "berserker",
        "title": "Le·a Berserker",
        "emoji": "⚔️",
        "description": "Tue beaucoup mais meurt souvent",
        "conditions": [_high("killRate"), _low("survival")],
        "priority": 12,
    },
    {
        "id": "detective",
        "title": "Le·a Détective",
        "emoji": "🔎",
        "description": "Observe silencieusement et vote juste",
        "conditions": [_high("votingAccuracy"), _low("talking")],
        "priority": 12,
    },
    {
        "id": "malchanceux",
        "title": "Le·a Malchanceux·se",
        "emoji": "🌧️",
        "description": "Perd tout le temps + grosses séries de défaites",
        "conditions": [
            _low("winRate"),
            _high("lossSeries"),
            _low("survival"),
            {"stat": "gamesPlayed", "minValue": 50},
        ],
        "priority": 12,
    },
    {
        "id": "avide",
        "title": "L'Avide",
        "emoji": "💰",
        "description": "Récolte beaucoup mais meurt",
        "conditions": [_high("loot", True), _low("survival", True)],
        "priority": 12,
    },
    {
        "id": "theoricien",
        "title": "Le·a Théoricien·ne",
        "emoji": "🎓",
        "description": "Parle beaucoup en débat mais vote peu",
        "conditions": [_high("talkingDuringMeeting"), _low("votingAggressive")],
        "priority": 12,
    },
    {
        "id": "debutant",
        "title": "Le·a Débutant·e",
        "emoji": "🆘",
        "description": "Peine en victoire, survie et récolte",
        "conditions": [_low("winRate"), _low("survival"), _low("loot"), _low("gamesPlayed")],
        "priority": 11,
    },
    {
        "id": "grande_gueule",
        "title": "La Grande Gueule",
        "emoji": "🗯️",
        "description": "Parle trop et meurt Jour 1",
        "conditions": [_low("survivalDay1"), _high("talking")],
        "priority": 11,
    },
    {
        "id": "peureux",
        "title": "Le·a Peureux·se",
        "emoji": "🐢",
        "description": "Survit longtemps mais perd quand même",
        "conditions": [_high("survival"), _low("winRate")],
        "priority": 11,
    },
    {
        "id": "travailleur",
        "title": "Le·a Travailleur·se",
        "emoji": "🐝",
        "description": "Récolte bien en Villageois mais perd",
        "conditions": [_high("lootVillageois"), _low("winRateVillageois")],
        "priority": 11,
    },
    {
        "id": "loup_repere",
        "title": "Le Loup Repéré",
        "emoji": "🔦",
        "description": "Récolte en Loup mais se fait démasquer",
        "conditions": [_high("lootLoup"), _low("winRateLoup")],
        "priority": 11,
    },
    {
        "id": "taulier",
        "title": "Le·a Taulier·e",
        "emoji": "🔑",
        "description": "Participe beaucoup et excelle dans un camp",
        "conditions": [_high("gamesPlayed"), {"stat": "campBalance", "category": "SPECIALIST"}],
        "priority": 11,
    },
    {
        "id": "conspirateur",
        "title": "Le·a Conspirateur·rice",
        "emoji": "🗨️",
        "description": "Bavard·e hors meeting, silencieux·se pendant",
        "conditions": [_high("talkingOutsideMeeting"), _low("talkingDuringMeeting")],
        "priority": 11,
    },
    {
        "id": "avocat",
        "title": "L'Avocat·e",
        "emoji": "⚖️",
        "description": "Silencieux·se hors débats, éloquent·e en meeting",
        "conditions": [_low("talkingOutsideMeeting"), _high("talkingDuringMeeting")],
        "priority": 11,
    },
    {
        "id": "opportuniste",
        "title": "L'Opportuniste",
        "emoji": "🎯",
        "description": "Gagne souvent mais joue peu",
        "conditions": [_high("winRate"), _low("gamesPlayed")],
        "priority": 11,
    },
    {
        "id": "apprenti",
        "title": "L'Apprenti",
        "emoji": "🔧",
        "description": "Peine dans tous les camps",
        "conditions": [_low("winRateVillageois"), _low("winRateLoup"), _low("winRateSolo")],
        "priority": 11,
    },
    {
        "id": "prudent",
        "title": "Le·a Prudent·e",
        "emoji": "🛡️",
        "description": "Survit mais récolte peu",
        "conditions": [_low("loot", True), _high("survival", True)],
        "priority": 11,
    },
    {
        "id": "cowboy",
        "title": "Le Cow-Boy",
        "emoji": "🤠",
        "description": "Vote vite et souvent",
        "conditions": [_high("votingAggressive"), _high("votingFirst")],
        "priority": 10,
    },
    {
        "id": "baratineur",
        "title": "Le·a Baratineur·se",
        "emoji": "📣",
        "description": "Parle beaucoup mais vote mal",
        "conditions": [_high("talking"), _low("votingAccuracy")],
        "priority": 10,
    },
    {
        "id": "enthusiaste",
        "title": "L'Enthousiaste",
        "emoji": "🌟",
        "description": "Participe beaucoup et gagne autant dans chaque camp",
        "conditions": [_high("gamesPlayed"), {"stat": "campBalance", "category": "BALANCED"}],
        "priority": 10,
    },
    {
        "id": "hyperactif",
        "title": "L'Hyperactif·ve",
        "emoji": "⚡",
        "description": "Bavard·e ET grande récolte",
        "conditions": [_high("talking"), _high("loot")],
        "priority": 10,
    },
    {
        "id": "efficace",
        "title": "L'Efficace",
        "emoji": "🏭",
        "description": "Silencieux·se mais productif·ve",
        "conditions": [_low("talking"), _high("loot")],
        "priority": 10,
    },
    {
        "id": "philosophe",
        "title": "Le·a Philosophe",
        "emoji": "📚",
        "description": "Bavard·e mais improductif·ve",
        "conditions": [_high("talking"), _low("loot")],
        "priority": 10,
    },
]
