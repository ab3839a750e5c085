from enum import Enum


class TaskStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class WeatherCondition(str, Enum):
    SUNNY = "sunny"
    CLOUDY = "cloudy"
    RAINY = "rainy"
    STORM = "storm"


STAFF_ROLES = {"admin"}
GUEST_ROLES = {"client", "architect"}

# Level/unit types a guest permission can open up besides its own unit
COMMON_AREA_TYPES = {"common", "garage"}

DEFAULT_PHASES = [
    {
        "id": "structure",
        "label": "ESTRUTURA",
        "code": "#STR",
        "color": "stone",
        "icon": "Box",
        "subtasks": ["Concretagem Laje", "Vigas e Pilares", "Escadaria", "Cura do Concreto"],
    },
    {
        "id": "masonry",
        "label": "ALVENARIA",
        "code": "#MAS",
        "color": "orange",
        "icon": "GripHorizontal",
        "subtasks": [
            "Marcação (1ª fiada)",
            "Levantamento Paredes",
            "Vergas e Contravergas",
            "Encunhamento",
            "Fechamento Shafts",
        ],
    },
    {
        "id": "waterproofing",
        "label": "IMPERMEAB.",
        "code": "#WAT",
        "color": "cyan",
        "icon": "ShieldAlert",
        "subtasks": [
            "Impermeabilização Box",
            "Impermeabilização Sacada",
            "Teste Estanqueidade (72h)",
            "Manta Asfáltica",
        ],
    },
    {
        "id": "hydraulic_infra",
        "label": "HIDRÁULICA (INFRA)",
        "code": "#HYD",
        "color": "blue",
        "icon": "Droplets",
        "subtasks": [
            "Prumadas (Água/Esgoto)",
            "Ramais Internos",
            "Teste de Pressão (Água/Esgoto)",
            "Infra de Ar Condicionado (Drenos)",
            "Proteção de Pontos (Vedação)",
        ],
    },
    {
        "id": "gas",
        "label": "GÁS",
        "code": "#GAS",
        "color": "red",
        "icon": "Flame",
        "subtasks": ["Tubulação de Gás", "Teste de Pressão Gás"],
    },
    {
        "id": "electrical_infra",
        "label": "ELÉTRICA (INFRA)",
        "code": "#ELE",
        "color": "yellow",
        "icon": "Zap",
        "subtasks": [
            "Tubulação Laje",
            "Rasgo e Tubulação Parede",
            "Instalação e Chumbamento de Caixinhas",
            "Tubulação de Piso",
        ],
    },
    {
        "id": "plaster",
        "label": "REBOCO / GESSO",
        "code": "#PLA",
        "color": "amber",
        "icon": "Layers",
        "subtasks": ["Chapisco", "Mestras e Taliscamento", "Reboco Interno", "Reboco Fachada", "Forro de Gesso"],
    },
    {
        "id": "flooring",
        "label": "CONTRAPISO",
        "code": "#FLO",
        "color": "slate",
        "icon": "LayoutGrid",
        "subtasks": ["Limpeza da Laje", "Instalação Manta Acústica", "Nivelamento e Execução Massa"],
    },
    {
        "id": "electrical_wiring",
        "label": "ELÉTRICA (FIAÇÃO)",
        "code": "#WIR",
        "color": "orange",
        "icon": "Cable",
        "subtasks": [
            "Limpeza de Caixinhas",
            "Passagem de Fios (Elétrica)",
            "Cabeamento Estruturado (TV/Internet)",
            "Montagem do Quadro de Distribuição (QDC)",
            "Teste de Continuidade",
        ],
    },
    {
        "id": "coating",
        "label": "REVESTIMENTOS",
        "code": "#COA",
        "color": "emerald",
        "icon": "Box",
        "subtasks": ["Assentamento Piso", "Azulejo Paredes", "Rejunte", "Soleiras e Peitoris"],
    },
    {
        "id": "painting",
        "label": "PINTURA",
        "code": "#PAI",
        "color": "rose",
        "icon": "PaintBucket",
        "subtasks": ["Lixamento e Selador", "Massa Corrida", "Pintura Teto", "Pintura Paredes"],
    },
    {
        "id": "final_finishing",
        "label": "ACABAMENTOS FINAIS",
        "code": "#FIN",
        "color": "violet",
        "icon": "Sparkles",
        "subtasks": [
            "Instalação de Louças (Vasos/Pias)",
            "Instalação de Metais (Torneiras/Registros)",
            "Acabamentos Elétricos (Tomadas/Luminárias)",
            "Teste Final (Carga e Estanqueidade)",
        ],
    },
]
