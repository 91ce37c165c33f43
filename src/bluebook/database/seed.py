"""Default chart of accounts for a sole proprietor filing a blue return.

Every seed code has 0 as its second digit, which marks it as a system account.
"""

from bluebook.domain.entities import AccountType

A = AccountType.ASSET
L = AccountType.LIABILITY
E = AccountType.EQUITY
R = AccountType.REVENUE
X = AccountType.EXPENSE

DEFAULT_ACCOUNTS: list[tuple[str, str, AccountType]] = [
    # Assets
    ("1001", "現金", A),
    ("1002", "当座預金", A),
    ("1003", "普通預金", A),
    ("1004", "定期預金", A),
    ("1005", "売掛金", A),
    ("1006", "未収入金", A),
    ("1007", "棚卸資産", A),
    ("1008", "前払費用", A),
    ("1009", "前払金", A),
    ("1010", "立替金", A),
    ("1011", "仮払金", A),
    ("1012", "仮払消費税", A),
    ("1013", "貸付金", A),
    ("1014", "建物", A),
    ("1015", "建物附属設備", A),
    ("1016", "機械装置", A),
    ("1017", "車両運搬具", A),
    ("1018", "工具器具備品", A),
    ("1019", "土地", A),
    ("1020", "ソフトウェア", A),
    ("1021", "敷金・保証金", A),
    # Liabilities
    ("2001", "買掛金", L),
    ("2002", "短期借入金", L),
    ("2003", "長期借入金", L),
    ("2004", "未払金", L),
    ("2005", "未払費用", L),
    ("2006", "未払消費税", L),
    ("2007", "前受金", L),
    ("2008", "預り金", L),
    ("2009", "源泉所得税預り金", L),
    ("2010", "仮受金", L),
    ("2011", "仮受消費税", L),
    # Equity
    ("3001", "元入金", E),
    ("3002", "事業主貸", E),
    ("3003", "事業主借", E),
    # Revenue
    ("4001", "売上高", R),
    ("4002", "雑収入", R),
    ("4003", "受取利息", R),
    # Expenses
    ("5001", "仕入高", X),
    ("5002", "租税公課", X),
    ("5003", "荷造運賃", X),
    ("5004", "水道光熱費", X),
    ("5005", "旅費交通費", X),
    ("5006", "通信費", X),
    ("5007", "広告宣伝費", X),
    ("5008", "接待交際費", X),
    ("5009", "損害保険料", X),
    ("5010", "修繕費", X),
    ("5011", "消耗品費", X),
    ("5012", "減価償却費", X),
    ("5013", "福利厚生費", X),
    ("5014", "給料賃金", X),
    ("5015", "外注工賃", X),
    ("5016", "利子割引料", X),
    ("5017", "地代家賃", X),
    ("5018", "貸倒金", X),
    ("5019", "雑損失", X),
    ("5020", "雑費", X),
    ("5021", "新聞図書費", X),
    ("5022", "研修費", X),
    ("5023", "会議費", X),
    ("5024", "支払手数料", X),
    ("5025", "諸会費", X),
]
