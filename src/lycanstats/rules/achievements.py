"""
Built-in achievement definitions.

Achievements are permanent and unlock at absolute thresholds, unlike titles
which are relative to the current player population. Each definition names
an evaluator (see analysis/achievements.py) plus its parameters, and lists
its levels as ``{stars, threshold}`` pairs: ⭐ / ⭐⭐ / ⭐⭐⭐ / 🐺.
"""


def _levels(*thresholds):
    return [{"stars": stars, "threshold": threshold} for stars, threshold in enumerate(thresholds, 1)]


ACHIEVEMENT_CATEGORIES = {
    "victories": {"label": "Victoires", "emoji": "🏆", "order": 1},
    "deaths": {"label": "Morts", "emoji": "💀", "order": 2},
    "kills": {"label": "Kills", "emoji": "🔪", "order": 3},
    "roles": {"label": "Rôles", "emoji": "🎭", "order": 4},
    "social": {"label": "Social", "emoji": "💬", "order": 5},
    "maps": {"label": "Cartes", "emoji": "🗺️", "order": 6},
    "special": {"label": "Spécial", "emoji": "✨", "order": 7},
}

ACHIEVEMENT_DEFINITIONS = [
    # ========================================================================
    # VICTORIES
    # ========================================================================
    {
        "id": "victories-villageois",
        "name": "Héros du Village",
        "description": "La justice finit toujours par triompher",
        "explanation": "Gagner X victoires en camp Villageois",
        "emoji": "🏘️",
        "category": "victories",
        "evaluator": "campWins",
        "params": {"camp": "Villageois"},
        "levels": _levels(10, 50, 100, 200),
    },
    {
        "id": "victories-loup",
        "name": "Terreur Nocturne",
        "description": "La nuit vous appartient",
        "explanation": "Gagner X victoires en camp Loup",
        "emoji": "🐺",
        "category": "victories",
        "evaluator": "campWins",
        "params": {"camp": "Loup"},
        "levels": _levels(10, 50, 100, 200),
    },
    {
        "id": "victories-solo",
        "name": "Solo Winner",
        "description": "Vous n'avez pas besoin d'alliés pour gagner...",
        "explanation": "Gagner X victoires en camp solo (Amoureux, Idiot du Village, Agent, etc.)",
        "emoji": "🎯",
        "category": "victories",
        "evaluator": "soloWins",
        "params": {},
        "levels": _levels(5, 10, 15, 30),
    },
    {
        "id": "defeats-villageois",
        "name": "L'important, c'est de participer (Villageois)",
        "description": "Vous avez perdu mais au moins, vous avez tenté",
        "explanation": "Perdre X parties en camp Villageois",
        "emoji": "😅",
        "category": "victories",
        "evaluator": "campLosses",
        "params": {"camp": "Villageois"},
        "levels": _levels(10, 50, 100, 200),
    },
    {
        "id": "defeats-loup",
        "name": "L'important, c'est de participer (Loup)",
        "description": "Même les loups ont des mauvais jours",
        "explanation": "Perdre X parties en camp Loup",
        "emoji": "🐾",
        "category": "victories",
        "evaluator": "campLosses",
        "params": {"camp": "Loup"},
        "levels": _levels(10, 50, 100, 200),
    },
    {
        "id": "vegan-wolf",
        "name": "Je suis Vegan",
        "description": "Vous avez eu la victoire sans rien faire, bravo",
        "explanation": "Gagner une partie en loup sans tuer personne",
        "emoji": "🥬",
        "category": "victories",
        "evaluator": "wolfWinNoKills",
        "params": {},
        "levels": _levels(1, 5, 10, 20),
    },
    {
        "id": "last-wolf",
        "name": "Le dernier loup",
        "description": "Vous n'avez besoin de personne pour gagner… Vous seul survivez.",
        "explanation": "Gagner X parties en étant l'unique survivant et donc le dernier loup",
        "emoji": "🏚️",
        "category": "victories",
        "evaluator": "lastWolfStanding",
        "params": {},
        "levels": _levels(1, 5, 10, 20),
    },
    {
        "id": "map-master",
        "name": "Map Master",
        "description": "Vous connaissez chaque recoin de chaque carte",
        "explanation": "Avoir au moins une victoire sur chaque map disponible",
        "emoji": "🗺️",
        "category": "maps",
        "evaluator": "winOnAllMaps",
        "params": {},
        "levels": _levels(1),
    },
    # ========================================================================
    # DEATHS
    # ========================================================================
    {
        "id": "fall-death",
        "name": "Saut raté",
        "description": "Bien que la touche saut n'existe pas, certains ont quand même chuté",
        "explanation": "Mourir X fois de chute",
        "emoji": "🪂",
        "category": "deaths",
        "evaluator": "deathByType",
        "params": {"deathType": "FALL"},
        "levels": _levels(1),
    },
    {
        "id": "starvation",
        "name": "Famine Fatale",
        "description": "Manger, c'est surfait",
        "explanation": "Mourir de faim",
        "emoji": "🍽️",
        "category": "deaths",
        "evaluator": "deathByType",
        "params": {"deathType": "STARVATION"},
        "levels": _levels(1, 5, 10),
    },
    {
        "id": "romeo-juliette",
        "name": "Roméo & Juliette",
        "description": "Vous ne pouviez pas survivre sans votre moitié",
        "explanation": "Mourir à cause de la mort de son amoureux (LOVER_DEATH)",
        "emoji": "💔",
        "category": "deaths",
        "evaluator": "deathByType",
        "params": {"deathType": "LOVER_DEATH"},
        "levels": _levels(5, 15, 30, 50),
    },
    {
        "id": "death-turn1",
        "name": "Bon, je reviens !",
        "description": "Vous êtes mort·e certes mais vous avez au moins eu le temps d'aller faire un truc",
        "explanation": 'Mourir la première nuit (DeathTiming = "N1")',
        "emoji": "⏱️",
        "category": "deaths",
        "evaluator": "deathOnTiming",
        "params": {"timing": "N1"},
        "levels": _levels(5, 15, 30, 50),
    },
    {
        "id": "voted-as-villager",
        "name": "Coupable par défaut",
        "description": "Malgré que vous soyez dans le camp des gentils, personne ne vous croit",
        "explanation": "Être éjecté d'un meeting en étant camp Villageois",
        "emoji": "🗳️",
        "category": "deaths",
        "evaluator": "votedAsCamp",
        "params": {"camp": "Villageois"},
        "levels": _levels(5, 15, 30, 50),
    },
    {
        "id": "wolf-killed-by-beast",
        "name": "C'est Bête",
        "description": "Un loup tué par La Bête... L'ironie du sort",
        "explanation": "Mourir en Loup par La Bête (BY_BEAST)",
        "emoji": "🦁",
        "category": "deaths",
        "evaluator": "roleDeathByType",
        "params": {"roleCamp": "Loup", "deathType": "BY_BEAST"},
        "levels": _levels(1, 3, 5),
    },
    {
        "id": "exploded",
        "name": "C'est moi la bombe !",
        "description": "Ce n'est pas la taille qui compte, c'est l'explosion",
        "explanation": "Mourir X fois d'une explosion",
        "emoji": "💣",
        "category": "deaths",
        "evaluator": "deathByType",
        "params": {"deathType": "BOMB"},
        "levels": _levels(1, 5, 10),
    },
    {
        "id": "crushed",
        "name": "Au ras des pâquerettes",
        "description": "Difficile quand on est petit d'éviter les pas des géants",
        "explanation": "Mourir X fois écrasé·e",
        "emoji": "🪨",
        "category": "deaths",
        "evaluator": "deathByType",
        "params": {"deathType": "CRUSHED"},
        "levels": _levels(1, 3, 5),
    },
    {
        "id": "avenger-death",
        "name": "Porte-Malheur",
        "description": "Votre tueur a été victime de votre malédiction",
        "explanation": "Avoir X fois son tueur qui meurt le même jour",
        "emoji": "⚖️",
        "category": "deaths",
        "evaluator": "killerDiedSameDay",
        "params": {},
        "levels": _levels(3, 10, 20, 40),
    },
    # ========================================================================
    # KILLS
    # ========================================================================
    {
        "id": "ponce-fesses",
        "name": "Ponce fesses",
        "description": "Comme un certain streameur, tu ponces des culs",
        "explanation": "Avoir fait 100 kills en loup (cumulé)",
        "emoji": "🍑",
        "category": "kills",
        "evaluator": "wolfKills",
        "params": {},
        "levels": _levels(25, 50, 100, 200),
    },
    {
        "id": "hunter-kill-enemy",
        "name": "Justice du Chasseur",
        "description": "Votre balle a trouvé sa cible... la bonne cette fois",
        "explanation": "En tant que Chasseur, tuer un joueur d'un camp adverse",
        "emoji": "🎯",
        "category": "kills",
        "evaluator": "hunterKillsEnemy",
        "params": {},
        "levels": _levels(1, 5, 10, 20),
    },
    {
        "id": "hunter-kill-villager",
        "name": "Tir ami",
        "description": "C'est un villageois que vous avez touché...",
        "explanation": "En tant que Chasseur, tuer un joueur du camp Villageois",
        "emoji": "😬",
        "category": "kills",
        "evaluator": "hunterKillsAlly",
        "params": {},
        "levels": _levels(1, 5, 10, 20),
    },
    {
        "id": "hunter-double-kill",
        "name": "Farmeur de loups",
        "description": "Un loup c'est bien, deux loups c'est mieux",
        "explanation": "En tant que chasseur, tuer deux loups/ennemis dans une seule partie",
        "emoji": "🏹",
        "category": "kills",
        "evaluator": "hunterMultiKillsInGame",
        "params": {"minKills": 2},
        "levels": _levels(1, 3, 5, 10),
    },
    {
        "id": "hunter-killed-by-wolf",
        "name": "Le Loup, c'est Khalen",
        "description": "Un loup vous a tué alors que vous êtes chasseur... Il évite les balles ?",
        "explanation": "Être chasseur et être tué par un loup",
        "emoji": "🐺",
        "category": "kills",
        "evaluator": "hunterKilledByWolf",
        "params": {},
        "levels": _levels(1, 5, 10, 20),
    },
    {
        "id": "assassin-potion-kill-enemy",
        "name": "Cocktail Mortel",
        "description": "La chimie au service de la justice",
        "explanation": "Tuer un joueur d'un camp adverse avec une potion assassin",
        "emoji": "🧪",
        "category": "kills",
        "evaluator": "assassinPotionKills",
        "params": {"targetCamp": "enemy"},
        "levels": _levels(1, 5, 10, 20),
    },
    {
        "id": "assassin-potion-kill-ally",
        "name": "Oups, mauvaise pioche",
        "description": "C'est pas votre faute, c'est la potion qui vous a tenté",
        "explanation": "Tuer X fois un joueur allié avec une potion assassin",
        "emoji": "☠️",
        "category": "kills",
        "evaluator": "assassinPotionKills",
        "params": {"targetCamp": "ally"},
        "levels": _levels(1, 3, 5, 10),
    },
    {
        "id": "victim-of-love",
        "name": "Victime de l'Amour",
        "description": "Pour que l'Amour existe, vous avez dû périr",
        "explanation": "Être tué par le loup amoureux (loup qui est aussi Amoureux)",
        "emoji": "💘",
        "category": "kills",
        "evaluator": "killedByLoverWolf",
        "params": {},
        "levels": _levels(3, 10, 20, 40),
    },
    # ========================================================================
    # ROLES
    # ========================================================================
    {
        "id": "agent-117",
        "name": "117",
        "description": "Bravo, vous avez tout de suite été capté",
        "explanation": "Être tué aux votes en tant qu'Agent",
        "emoji": "🕵️",
        "category": "roles",
        "evaluator": "agentVoted",
        "params": {},
        "levels": _levels(1, 5, 10),
    },
    {
        "id": "louveteau-orphan",
        "name": "Le Louveteau Orphelin",
        "description": "Tous les loups sont morts mais vous, petit louveteau, vous avez tenu bon",
        "explanation": "Gagner en tant que Louveteau après la mort de tous les autres loups",
        "emoji": "🐶",
        "category": "roles",
        "evaluator": "louveteauOrphanWin",
        "params": {},
        "levels": _levels(1, 3, 5),
    },
    {
        "id": "solo-master",
        "name": "Je maîtrise le solo",
        "description": "Maître de chaque rôle solitaire",
        "explanation": "Avoir au moins une victoire avec chaque rôle solo (Amoureux, Idiot du Village, Agent, etc.)",
        "emoji": "👑",
        "category": "roles",
        "evaluator": "winWithAllSoloRoles",
        "params": {},
        "levels": _levels(1),
    },
    # ========================================================================
    # SOCIAL (voting / meetings)
    # ========================================================================
    {
        "id": "bavard",
        "name": "M. / Mme Bavard",
        "description": "Vous avez beaucoup de choses à dire, visiblement",
        "explanation": "Parler au moins 50% du temps total lors d'une partie",
        "emoji": "🗣️",
        "category": "social",
        "evaluator": "talkingPercentage",
        "params": {"minPercentage": 50},
        "levels": _levels(1, 5, 10),
    },
    {
        "id": "misunderstood",
        "name": "L'Incompris",
        "description": "Vous avez vu juste mais personne ne vous a cru... et c'est vous qui payez",
        "explanation": "Voter correctement pour un loup/rôle solo au conseil mais se faire voter à la place",
        "emoji": "🤷",
        "category": "social",
        "evaluator": "correctVoteButVoted",
        "params": {},
        "levels": _levels(1, 5, 10, 20),
    },
    {
        "id": "false-guilty",
        "name": "Faux Coupable",
        "description": "Malgré votre innocence, tout le village s'est retourné contre vous",
        "explanation": "Être voté à l'unanimité alors que vous êtes villageois",
        "emoji": "😤",
        "category": "social",
        "evaluator": "unanimousVoteAsVillager",
        "params": {},
        "levels": _levels(1, 3, 5),
    },
    {
        "id": "only-passer",
        "name": "Au cas où, je passe",
        "description": "Être le seul joueur à passer dans un meeting... Courage !",
        "explanation": 'Être le seul joueur à passer (voter "Passé") lors d\'un meeting',
        "emoji": "🙈",
        "category": "social",
        "evaluator": "onlyPasserInMeeting",
        "params": {},
        "levels": _levels(1, 5, 10),
    },
    {
        "id": "kill-surprise",
        "name": "Kill surprise",
        "description": "Être le seul à voter pour un joueur... et il est éliminé. Surprise !",
        "explanation": "Être le seul votant pour un joueur qui se fait éliminer au vote",
        "emoji": "😱",
        "category": "social",
        "evaluator": "soleVoterElimination",
        "params": {},
        "levels": _levels(1, 3, 5),
    },
    {
        "id": "democrat",
        "name": "Troisième oeil",
        "description": "Vous connaissiez tous les rôles à l'avance",
        "explanation": "Faire X parties en votant que des Loups ou des solos (minimum 5 votes d'affilée)",
        "emoji": "🏛️",
        "category": "social",
        "evaluator": "consecutiveCorrectVotes",
        "params": {"minConsecutive": 5},
        "levels": _levels(1, 3, 5),
    },
    # ========================================================================
    # SPECIAL
    # ========================================================================
    {
        "id": "colors-of-lycans",
        "name": "United Colors of Lycans",
        "description": "L'arc-en-ciel des victoires",
        "explanation": "Jouer et gagner des parties dans au moins 5 couleurs différentes",
        "emoji": "🌈",
        "category": "special",
        "evaluator": "winInColors",
        "params": {"minColors": 5},
        "levels": _levels(1),
    },
]
