"""Starter chart of accounts from the BAS plan.

A small selection of BAS accounts covering a typical Swedish small business:
cash and bank, VAT, payroll liabilities, sales by VAT rate and the common
cost accounts. Each row is (account number, Swedish name, English name).
"""

BAS_STARTER_CHART: tuple[tuple[str, str, str], ...] = (
    # Assets
    ("1510", "Kundfordringar", "Accounts Receivable"),
    ("1910", "Kassa", "Cash"),
    ("1920", "Plusgiro", "Plusgiro"),
    ("1930", "Företagskonto/checkkonto/affärskonto", "Business Account"),
    ("1940", "Övriga bankkonton", "Other Bank Accounts"),
    # Equity and liabilities
    ("2010", "Eget kapital", "Equity"),
    ("2440", "Leverantörsskulder", "Accounts Payable"),
    ("2610", "Utgående moms 25%", "Output VAT 25%"),
    ("2620", "Utgående moms 12%", "Output VAT 12%"),
    ("2630", "Utgående moms 6%", "Output VAT 6%"),
    ("2640", "Ingående moms", "Input VAT"),
    ("2650", "Redovisningskonto för moms", "VAT Settlement Account"),
    ("2710", "Personalskatt", "Employee Withholding Tax"),
    ("2910", "Upplupna löner", "Accrued Wages"),
    ("2920", "Upplupna semesterlöner", "Accrued Vacation Pay"),
    # Revenue
    (
        "3000",
        "Försäljning och utfört arbete samt övriga momspliktiga intäkter",
        "Sales Revenue",
    ),
    ("3010", "Försäljning varor 25% moms", "Sales Goods 25% VAT"),
    ("3011", "Försäljning varor 12% moms", "Sales Goods 12% VAT"),
    ("3012", "Försäljning varor 6% moms", "Sales Goods 6% VAT"),
    ("3040", "Försäljning tjänster 25% moms", "Sales Services 25% VAT"),
    ("3041", "Försäljning tjänster 12% moms", "Sales Services 12% VAT"),
    ("3042", "Försäljning tjänster 6% moms", "Sales Services 6% VAT"),
    ("3100", "Försäljning momsfri", "Tax-Exempt Sales"),
    ("3300", "Export", "Export Sales"),
    ("3740", "Öres- och kronutjämning", "Rounding Adjustment"),
    # Costs
    ("4000", "Varuinköp", "Purchases"),
    ("4010", "Inköp material och varor", "Materials and Goods Purchases"),
    ("5000", "Lokalkostnader", "Premises Costs"),
    ("5010", "Lokalhyra", "Rent"),
    (
        "5400",
        "Förbrukningsinventarier och förbrukningsmaterial",
        "Consumable Equipment",
    ),
    ("5410", "Förbrukningsinventarier", "Consumable Supplies"),
    ("5800", "Resekostnader", "Travel Expenses"),
    ("5810", "Biljetter", "Travel Tickets"),
    ("5900", "Reklam och PR", "Advertising and PR"),
    ("5910", "Annonsering", "Advertising"),
    ("6000", "Övriga försäljningskostnader", "Other Sales Expenses"),
    ("6100", "Kontorsmaterial och trycksaker", "Office Supplies"),
    ("6110", "Kontorsmaterial", "Office Materials"),
    ("6200", "Tele och post", "Telephone and Postage"),
    ("6210", "Telekommunikation", "Telecommunications"),
    ("6500", "Övriga externa tjänster", "Other External Services"),
    ("6530", "Redovisningstjänster", "Accounting Services"),
    ("6540", "IT-tjänster", "IT Services"),
    ("6570", "Bankkostnader", "Bank Fees"),
    ("7000", "Löner till kollektivanställda", "Wages Collective Employees"),
    ("7010", "Löner till kollektivanställda", "Wages Collective"),
    ("7200", "Löner till tjänstemän och företagsledare", "Salaries Management"),
    ("7210", "Löner till tjänstemän", "Salaries Employees"),
    ("7500", "Sociala och andra avgifter enligt lag och avtal", "Social Contributions"),
    ("7510", "Arbetsgivaravgifter", "Employer Contributions"),
    # Financial items and result
    ("8000", "Finansiella intäkter", "Financial Income"),
    ("8300", "Ränteintäkter", "Interest Income"),
    ("8400", "Räntekostnader", "Interest Expenses"),
    ("8910", "Skatt på årets resultat", "Income Tax"),
    ("8990", "Resultat", "Net Income"),
)
