PRODUCTS = [
    {
        "brand_name": "ザ・プレミアム・モルツ",
        "category": "draft_beer",
        "aliases": ["プレモル", "The Premium Malt's", "Premium Malts"],
        "is_active": True,
    },
    {
        "brand_name": "金麦",
        "category": "draft_beer",
        "aliases": ["Kinmugi"],
        "is_active": True,
    },
    {
        "brand_name": "角ハイボール",
        "category": "highball",
        "aliases": ["角ハイ", "Kaku Highball", "角瓶"],
        "is_active": True,
    },
    {
        "brand_name": "翠",
        "category": "gin_soda",
        "aliases": ["翠ジンソーダ", "SUI", "Sui Gin Soda"],
        "is_active": True,
    },
    {
        "brand_name": "こだわり酒場のレモンサワー",
        "category": "sour",
        "aliases": ["こだわりレモンサワー", "Kodawari Sakaba Lemon Sour"],
        "is_active": True,
    },
    {
        "brand_name": "-196℃",
        "category": "sour",
        "aliases": ["-196", "マイナス196度", "-196 Strong Zero"],
        "is_active": True,
    },
    {
        "brand_name": "ほろよい",
        "category": "sour",
        "aliases": ["Horoyoi"],
        "is_active": True,
    },
    {
        "brand_name": "オールフリー",
        "category": "non_alcohol",
        "aliases": ["All Free", "ALL-FREE"],
        "is_active": True,
    },
    {
        "brand_name": "サントリー天然水",
        "category": "water",
        "aliases": ["天然水", "Suntory Tennensui"],
        "is_active": True,
    },
    {
        "brand_name": "伊右衛門",
        "category": "soft_drink",
        "aliases": ["Iyemon"],
        "is_active": True,
    },
    {
        "brand_name": "BOSS",
        "category": "soft_drink",
        "aliases": ["ボス", "Suntory Boss"],
        "is_active": True,
    },
    {
        "brand_name": "C.C.レモン",
        "category": "soft_drink",
        "aliases": ["CCレモン", "CC Lemon"],
        "is_active": True,
    },
    {
        "brand_name": "サントリー烏龍茶",
        "category": "soft_drink",
        "aliases": ["烏龍茶", "Suntory Oolong Tea"],
        "is_active": True,
    },
]
